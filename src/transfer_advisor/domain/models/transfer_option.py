"""Transfer option domain model."""

from dataclasses import dataclass, field
from typing import Literal

from transfer_advisor.domain.models.departure import Departure

RiskLevel = Literal["LOW", "MED", "HIGH"]


@dataclass(frozen=True)
class TransferOption:
    """One fully evaluated train -> bus connection."""

    option_id: str
    train: Departure
    bus: Departure
    bus_stop_variant: str | None
    walk_sec: int
    exit_buffer_sec: int
    min_transfer_buffer_sec: int
    ready_sec: int  # earliest moment the traveler can board the bus
    buffer_sec: int  # slack between readiness and bus departure
    risk: RiskLevel
    score: int
    train_transfer: Departure | None = None
    train_transfer_time_sec: int | None = None
    warnings: list[str] = field(default_factory=list)
