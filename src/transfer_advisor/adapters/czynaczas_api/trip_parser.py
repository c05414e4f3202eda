"""Parser for czynaczas.pl trip responses."""

import logging
from typing import Any

from transfer_advisor.domain.models.trip_detail import TripDetail, TripStop

logger = logging.getLogger(__name__)


def _float_or_zero(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class TripParser:
    """Parses a raw trip object into a TripDetail."""

    @staticmethod
    def parse_trip(trip_id: str, data: dict[str, Any]) -> TripDetail:
        """Parse stops and path geometry.

        Stops are ordered by their sequence number; entries without a stop id
        are dropped.
        """
        raw_stops = data.get("stops") or []
        stops = [
            stop
            for index, raw in enumerate(raw_stops)
            if (stop := TripParser._parse_stop(raw, index)) is not None
        ]
        stops.sort(key=lambda s: s.sequence)

        return TripDetail(
            trip_id=str(data.get("trip_id") or trip_id),
            stops=stops,
            shape=TripParser._parse_shape(data.get("shape") or data.get("path") or []),
        )

    @staticmethod
    def _parse_stop(raw: Any, index: int) -> TripStop | None:
        if not isinstance(raw, dict):
            return None
        stop_id = raw.get("stop_id") or raw.get("id")
        if not stop_id:
            logger.warning(f"Skipping trip stop without id: {raw!r}")
            return None

        sequence = _int_or_none(raw.get("sequence", raw.get("stop_sequence")))
        scheduled = _int_or_none(raw.get("departure_time", raw.get("scheduled_time")))
        return TripStop(
            stop_id=str(stop_id),
            name=str(raw.get("name") or raw.get("stop_name") or stop_id),
            latitude=_float_or_zero(raw.get("lat", raw.get("latitude"))),
            longitude=_float_or_zero(raw.get("lon", raw.get("longitude"))),
            sequence=sequence if sequence is not None else index,
            scheduled_sec=scheduled,
        )

    @staticmethod
    def _parse_shape(raw_shape: Any) -> list[tuple[float, float]]:
        """Parse ``[[lat, lon], ...]`` or ``[{"lat": .., "lon": ..}, ...]``."""
        if not isinstance(raw_shape, list):
            return []

        points: list[tuple[float, float]] = []
        for point in raw_shape:
            if isinstance(point, (list, tuple)) and len(point) >= 2:
                points.append((_float_or_zero(point[0]), _float_or_zero(point[1])))
            elif isinstance(point, dict):
                lat = point.get("lat", point.get("latitude"))
                lon = point.get("lon", point.get("longitude"))
                if lat is not None and lon is not None:
                    points.append((_float_or_zero(lat), _float_or_zero(lon)))
        return points
