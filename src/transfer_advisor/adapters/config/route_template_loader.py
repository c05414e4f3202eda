"""Route template loader.

Reads a resolved route template from TOML::

    [template]
    id = "home-office"
    name = "Home to office"

    [transfer]
    exit_buffer_sec = 60
    min_transfer_buffer_sec = 120

    [transfer.walk_times]
    "189" = 3
    "401_A" = 5

    [[segments]]
    seq = 1
    mode = "TRAIN"
    from_stop_id = "wkd_wrako"
    to_stop_id = "wkd_wsrod"
    allowed_route_ids = ["WKD"]

    [[segments]]
    seq = 2
    mode = "BUS"
    allowed_route_ids = ["401"]

    [segments.stop_variants]
    "401" = [{ stop_id = "701301", variant = "A" }]
"""

import tomllib
from pathlib import Path
from typing import Any

from transfer_advisor.domain.errors import RouteTemplateError
from transfer_advisor.domain.models.route_template import (
    RouteSegment,
    RouteTemplate,
    StopVariant,
    TransferConfig,
)

_SEGMENT_MODES = ("TRAIN", "BUS", "WALK")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class RouteTemplateLoader:
    """Loads route templates from TOML files or already-parsed data."""

    @staticmethod
    def load(path: str | Path) -> RouteTemplate:
        """Load a route template from a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            RouteTemplateError: If the file is not valid TOML or not a valid template.
        """
        template_path = Path(path)
        if not template_path.exists():
            raise FileNotFoundError(f"Route template file not found: {template_path}")

        with open(template_path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise RouteTemplateError(f"Invalid TOML in {template_path}: {e}") from e

        return RouteTemplateLoader.load_from_data(data, default_id=template_path.stem)

    @staticmethod
    def load_from_data(data: dict[str, Any], default_id: str = "default") -> RouteTemplate:
        """Build a route template from a parsed dictionary."""
        template_data = data.get("template", {})
        if not isinstance(template_data, dict):
            raise RouteTemplateError("'template' must be a table")

        template_id = str(template_data.get("id") or default_id)
        segments_data = data.get("segments", [])
        if not isinstance(segments_data, list):
            raise RouteTemplateError("'segments' must be an array of tables")

        segments = [
            RouteTemplateLoader.load_segment(segment_data, index)
            for index, segment_data in enumerate(segments_data, start=1)
        ]

        return RouteTemplate(
            template_id=template_id,
            name=str(template_data.get("name") or template_id),
            segments=segments,
            transfer_config=RouteTemplateLoader.load_transfer_config(data.get("transfer", {})),
            is_active=bool(template_data.get("is_active", True)),
        )

    @staticmethod
    def load_segment(segment_data: Any, default_seq: int) -> RouteSegment:
        """Build one route segment."""
        if not isinstance(segment_data, dict):
            raise RouteTemplateError(f"Segment {default_seq} must be a table")

        mode = str(segment_data.get("mode", "")).upper()
        if mode not in _SEGMENT_MODES:
            raise RouteTemplateError(
                f"Segment {default_seq} has invalid mode {segment_data.get('mode')!r}; "
                f"expected one of {', '.join(_SEGMENT_MODES)}"
            )

        allowed = segment_data.get("allowed_route_ids", [])
        if not isinstance(allowed, list):
            raise RouteTemplateError(f"Segment {default_seq}: allowed_route_ids must be a list")

        try:
            seq = int(segment_data.get("seq", default_seq))
        except (TypeError, ValueError) as e:
            raise RouteTemplateError(f"Segment {default_seq}: seq must be an integer") from e

        return RouteSegment(
            seq=seq,
            mode=mode,  # type: ignore[arg-type]
            agency=_optional_str(segment_data.get("agency")),
            from_stop_id=_optional_str(segment_data.get("from_stop_id")),
            to_stop_id=_optional_str(segment_data.get("to_stop_id")),
            allowed_route_ids=[str(route_id) for route_id in allowed],
            stop_variants=RouteTemplateLoader.load_stop_variants(
                segment_data.get("stop_variants"), seq
            ),
            notes=_optional_str(segment_data.get("notes")),
        )

    @staticmethod
    def load_stop_variants(data: Any, seq: int) -> dict[str, list[StopVariant]] | None:
        """Build the line -> stop variants map of a segment."""
        if data is None:
            return None
        if not isinstance(data, dict):
            raise RouteTemplateError(f"Segment {seq}: stop_variants must be a table")

        variants: dict[str, list[StopVariant]] = {}
        for line, entries in data.items():
            if not isinstance(entries, list):
                raise RouteTemplateError(f"Segment {seq}: stop_variants.{line} must be a list")
            line_variants = []
            for entry in entries:
                if not isinstance(entry, dict) or not entry.get("stop_id"):
                    raise RouteTemplateError(
                        f"Segment {seq}: every stop_variants.{line} entry needs a stop_id"
                    )
                line_variants.append(
                    StopVariant(
                        stop_id=str(entry["stop_id"]),
                        variant=_optional_str(entry.get("variant")),
                        note=_optional_str(entry.get("note")),
                    )
                )
            variants[str(line)] = line_variants
        return variants or None

    @staticmethod
    def load_transfer_config(data: Any) -> TransferConfig:
        """Build the transfer policy, using defaults for missing values."""
        if not isinstance(data, dict):
            raise RouteTemplateError("'transfer' must be a table")

        defaults = TransferConfig()
        walk_times = data.get("walk_times", {})
        if not isinstance(walk_times, dict):
            raise RouteTemplateError("transfer.walk_times must be a table")

        try:
            return TransferConfig(
                exit_buffer_sec=int(data.get("exit_buffer_sec", defaults.exit_buffer_sec)),
                min_transfer_buffer_sec=int(
                    data.get("min_transfer_buffer_sec", defaults.min_transfer_buffer_sec)
                ),
                walk_times={str(key): float(value) for key, value in walk_times.items()},
            )
        except (TypeError, ValueError) as e:
            raise RouteTemplateError(f"Invalid transfer settings: {e}") from e
