"""Trip detail domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TripStop:
    """A stop on a trip's path."""

    stop_id: str
    name: str
    latitude: float
    longitude: float
    sequence: int
    scheduled_sec: int | None
    delay_sec: int | None = None


@dataclass(frozen=True)
class TripDetail:
    """Ordered stop list and path geometry of a single trip."""

    trip_id: str
    stops: list[TripStop]
    shape: list[tuple[float, float]] = field(default_factory=list)  # (lat, lon)
