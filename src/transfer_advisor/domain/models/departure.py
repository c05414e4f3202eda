"""Departure domain model."""

from dataclasses import dataclass, field
from typing import Literal

TransportMode = Literal["TRAIN", "BUS"]


@dataclass(frozen=True)
class AccessibilityFeatures:
    """Vehicle feature flags reported by the upstream source."""

    low_floor: bool = False
    air_conditioning: bool = False
    ticket_machine: bool = False


@dataclass(frozen=True)
class Departure:
    """A normalized departure event at a single stop.

    Times are seconds since midnight of the service date. ``delay_sec`` is
    derived from the live and scheduled times and cannot be passed in.
    """

    trip_id: str | None
    mode: TransportMode
    agency: str
    route_id: str
    headsign: str
    stop_id: str
    date: str  # YYYYMMDD
    scheduled_sec: int
    live_sec: int | None = None
    vehicle_id: str | None = None
    features: AccessibilityFeatures | None = None
    source_type: str = ""
    delay_sec: int | None = field(init=False)

    def __post_init__(self) -> None:
        delay = self.live_sec - self.scheduled_sec if self.live_sec is not None else None
        object.__setattr__(self, "delay_sec", delay)

    @property
    def effective_sec(self) -> int:
        """Live time when known, otherwise the scheduled time."""
        return self.live_sec if self.live_sec is not None else self.scheduled_sec

    @property
    def has_live_data(self) -> bool:
        return self.live_sec is not None
