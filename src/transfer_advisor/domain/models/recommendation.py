"""Recommendation result domain models."""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from transfer_advisor.domain.models.transfer_option import TransferOption

SourceStatus = Literal["available", "unavailable"]


@dataclass(frozen=True)
class LiveStatus:
    """Upstream availability as observed while computing a recommendation."""

    train_source: SourceStatus
    bus_source: SourceStatus
    stop_status: dict[str, SourceStatus] = field(default_factory=dict)


@dataclass(frozen=True)
class RecommendationMeta:
    template_id: str
    timestamp: str  # ISO 8601, UTC
    live_status: LiveStatus


@dataclass(frozen=True)
class Recommendation:
    """Ranked transfer options plus the metadata describing how they were obtained."""

    options: list[TransferOption]
    meta: RecommendationMeta

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-ready dictionary."""
        live_status = self.meta.live_status
        return {
            "options": [asdict(option) for option in self.options],
            "meta": {
                "template_id": self.meta.template_id,
                "timestamp": self.meta.timestamp,
                "live_status": {
                    "train_source": live_status.train_source,
                    "bus_source": live_status.bus_source,
                },
                "stop_status": dict(live_status.stop_status),
            },
        }
