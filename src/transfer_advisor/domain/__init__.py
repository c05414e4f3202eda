"""Domain layer - core models, ports and errors."""

from transfer_advisor.domain.errors import (
    RouteTemplateError,
    TransferAdvisorError,
    UpstreamError,
)
from transfer_advisor.domain.models import (
    Departure,
    Recommendation,
    RouteSegment,
    RouteTemplate,
    TransferConfig,
    TransferOption,
)
from transfer_advisor.domain.ports import DepartureRepository, TripRepository

__all__ = [
    "Departure",
    "DepartureRepository",
    "Recommendation",
    "RouteSegment",
    "RouteTemplate",
    "RouteTemplateError",
    "TransferAdvisorError",
    "TransferConfig",
    "TransferOption",
    "TripRepository",
    "UpstreamError",
]
