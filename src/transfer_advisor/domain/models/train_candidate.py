"""Train candidate domain model."""

from dataclasses import dataclass, field

from transfer_advisor.domain.models.departure import Departure


@dataclass(frozen=True)
class TrainCandidate:
    """A train ride being evaluated for a single recommendation request."""

    train: Departure
    transfer: Departure | None  # same ride observed at the transfer stop
    transfer_time_sec: int
    warnings: list[str] = field(default_factory=list)
