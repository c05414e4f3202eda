"""Parser for czynaczas.pl timetable records.

The API has served two record shapes for the same data:

- ``legacy``: ``line``, ``direction``, ``day`` (``YYYY-MM-DD``) and a nested
  ``features`` object; usually no ``trip_id``.
- ``current``: ``route_id``, ``headsign``, ``date`` (``YYYYMMDD``), ``trip_id``
  and flat accessibility flags.

The shape is detected once per record by field presence. Each shape parser
still falls back across the alternate field names, since mixed records have
been observed.
"""

import logging
from typing import Any, Literal

from transfer_advisor.adapters.czynaczas_api.constants import (
    MODE_AGENCIES,
    TRAIN_LINE_LABELS,
    VEHICLE_TYPE_MODES,
)
from transfer_advisor.domain.models.departure import (
    AccessibilityFeatures,
    Departure,
    TransportMode,
)

logger = logging.getLogger(__name__)

RecordShape = Literal["legacy", "current"]

_CURRENT_SHAPE_KEYS = ("route_id", "headsign", "date")


def _first_present(raw: dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among ``keys``."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class DepartureParser:
    """Parses raw timetable records into Departure objects."""

    @staticmethod
    def detect_shape(raw: dict[str, Any]) -> RecordShape:
        """Classify a raw record by which field names it carries."""
        if any(key in raw for key in _CURRENT_SHAPE_KEYS):
            return "current"
        return "legacy"

    @staticmethod
    def parse_departures(records: list[Any]) -> list[Departure]:
        """Parse raw records, skipping ones that cannot be normalized.

        Args:
            records: Raw records from the timetable endpoint.

        Returns:
            Departures sorted ascending by effective time.
        """
        departures = []
        for raw in records:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping non-object timetable record: {raw!r}")
                continue
            departure = DepartureParser.parse_departure(raw)
            if departure is not None:
                departures.append(departure)

        departures.sort(key=lambda d: d.effective_sec)
        return departures

    @staticmethod
    def parse_departure(raw: dict[str, Any]) -> Departure | None:
        """Parse a single raw record of either shape."""
        shape = DepartureParser.detect_shape(raw)
        if shape == "current":
            return DepartureParser._parse_current(raw)
        return DepartureParser._parse_legacy(raw)

    @staticmethod
    def _parse_legacy(raw: dict[str, Any]) -> Departure | None:
        line = _as_str(_first_present(raw, "line", "route_id")) or ""
        headsign = _as_str(_first_present(raw, "direction", "headsign")) or ""
        day = _as_str(_first_present(raw, "day", "date"))
        return DepartureParser._build(raw, "legacy", line, headsign, day)

    @staticmethod
    def _parse_current(raw: dict[str, Any]) -> Departure | None:
        line = _as_str(_first_present(raw, "route_id", "line")) or ""
        headsign = _as_str(_first_present(raw, "headsign", "direction")) or ""
        day = _as_str(_first_present(raw, "date", "day"))
        return DepartureParser._build(raw, "current", line, headsign, day)

    @staticmethod
    def _build(
        raw: dict[str, Any],
        shape: RecordShape,
        line: str,
        headsign: str,
        day: str | None,
    ) -> Departure | None:
        scheduled = _as_int(_first_present(raw, "departure_time", "scheduled_time"))
        if scheduled is None:
            logger.warning(f"Skipping {shape} record without scheduled time: {raw!r}")
            return None

        live = _as_int(_first_present(raw, "departure_time_live", "live_time"))
        vehicle_type = _as_int(_first_present(raw, "vehicle_type_id", "vehicle_type"))
        mode = DepartureParser.classify_mode(vehicle_type, line)

        return Departure(
            trip_id=_as_str(raw.get("trip_id")),
            mode=mode,
            agency=MODE_AGENCIES[mode],
            route_id=line,
            headsign=headsign,
            stop_id=_as_str(raw.get("stop_id")) or "",
            date=DepartureParser.normalize_date(day),
            scheduled_sec=scheduled,
            live_sec=live,
            vehicle_id=_as_str(raw.get("vehicle_id")),
            features=DepartureParser._parse_features(raw),
            source_type=str(vehicle_type) if vehicle_type is not None else shape,
        )

    @staticmethod
    def classify_mode(vehicle_type: int | None, line: str) -> TransportMode:
        """Determine the transport mode from the vehicle type code or the line label."""
        if vehicle_type is not None and vehicle_type in VEHICLE_TYPE_MODES:
            mode: TransportMode = VEHICLE_TYPE_MODES[vehicle_type]  # type: ignore[assignment]
            return mode
        if line.upper() in TRAIN_LINE_LABELS:
            return "TRAIN"
        return "BUS"

    @staticmethod
    def normalize_date(day: str | None) -> str:
        """Normalize ``YYYY-MM-DD`` or ``YYYYMMDD`` to ``YYYYMMDD``."""
        if not day:
            return ""
        return day.replace("-", "")

    @staticmethod
    def _parse_features(raw: dict[str, Any]) -> AccessibilityFeatures | None:
        """Read accessibility flags from a nested ``features`` object or flat keys."""
        features = raw.get("features")
        source = features if isinstance(features, dict) else raw
        keys = ("low_floor", "air_conditioning", "ticket_machine")
        if not any(key in source for key in keys):
            return None
        return AccessibilityFeatures(
            low_floor=bool(source.get("low_floor")),
            air_conditioning=bool(source.get("air_conditioning")),
            ticket_machine=bool(source.get("ticket_machine")),
        )
