"""Route template domain models.

A route template is the traveler's fixed train -> walk -> bus itinerary. It is
authored elsewhere and handed to the engine as a resolved snapshot.
"""

from dataclasses import dataclass, field
from typing import Literal

SegmentMode = Literal["TRAIN", "BUS", "WALK"]


@dataclass(frozen=True)
class StopVariant:
    """One physical stop or platform serving a line for a leg."""

    stop_id: str
    variant: str | None = None  # e.g. "A" / "B"
    note: str | None = None


@dataclass(frozen=True)
class RouteSegment:
    """One mode-homogeneous leg of a route template."""

    seq: int
    mode: SegmentMode
    agency: str | None = None
    from_stop_id: str | None = None
    to_stop_id: str | None = None  # transfer stop for the train leg
    allowed_route_ids: list[str] = field(default_factory=list)
    stop_variants: dict[str, list[StopVariant]] | None = None  # line -> variants
    notes: str | None = None

    def variants_for_line(self, line: str) -> list[StopVariant]:
        """Stops serving ``line`` on this leg, falling back to the boarding stop."""
        if self.stop_variants and self.stop_variants.get(line):
            return list(self.stop_variants[line])
        if self.from_stop_id:
            return [StopVariant(stop_id=self.from_stop_id)]
        return []

    def all_stop_ids(self) -> list[str]:
        """Distinct stop ids referenced by this leg, in declaration order.

        Includes the boarding stop whenever an allowed line has no variants of
        its own and falls back to it.
        """
        stop_ids: list[str] = []
        for variants in (self.stop_variants or {}).values():
            for variant in variants:
                if variant.stop_id not in stop_ids:
                    stop_ids.append(variant.stop_id)

        needs_fallback = not self.stop_variants or any(
            not self.stop_variants.get(line) for line in self.allowed_route_ids
        )
        if needs_fallback and self.from_stop_id and self.from_stop_id not in stop_ids:
            stop_ids.append(self.from_stop_id)
        return stop_ids


@dataclass(frozen=True)
class TransferConfig:
    """Transfer policy of a template.

    ``walk_times`` maps a line (or line + variant, as ``"401_A"`` or ``"401A"``)
    to walking minutes between the transfer point and the bus stop.
    """

    exit_buffer_sec: int = 60
    min_transfer_buffer_sec: int = 120
    walk_times: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RouteTemplate:
    """Resolved route template snapshot."""

    template_id: str
    name: str
    segments: list[RouteSegment]
    transfer_config: TransferConfig = field(default_factory=TransferConfig)
    is_active: bool = True

    def segment(self, mode: SegmentMode) -> RouteSegment | None:
        """First segment of the given mode, by sequence number."""
        for segment in sorted(self.segments, key=lambda s: s.seq):
            if segment.mode == mode:
                return segment
        return None

    def validation_errors(self) -> list[str]:
        """Describe every problem that would stop the engine from using this template."""
        errors: list[str] = []
        train = self.segment("TRAIN")
        bus = self.segment("BUS")

        if train is None:
            errors.append("template has no TRAIN segment")
        elif not train.from_stop_id:
            errors.append("TRAIN segment has no boarding stop (from_stop_id)")

        if bus is None:
            errors.append("template has no BUS segment")
        else:
            if not bus.from_stop_id and not bus.stop_variants:
                errors.append("BUS segment has neither from_stop_id nor stop_variants")
            if not bus.allowed_route_ids:
                errors.append("BUS segment allows no lines (allowed_route_ids is empty)")

        config = self.transfer_config
        if config.exit_buffer_sec < 0:
            errors.append("exit_buffer_sec must not be negative")
        if config.min_transfer_buffer_sec < 0:
            errors.append("min_transfer_buffer_sec must not be negative")
        for key, minutes in config.walk_times.items():
            if minutes <= 0:
                errors.append(f"walk time for '{key}' must be positive")

        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()
