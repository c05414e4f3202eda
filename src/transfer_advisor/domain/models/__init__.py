"""Domain models for transfer recommendations."""

from transfer_advisor.domain.models.departure import (
    AccessibilityFeatures,
    Departure,
    TransportMode,
)
from transfer_advisor.domain.models.error_details import ErrorDetails
from transfer_advisor.domain.models.recommendation import (
    LiveStatus,
    Recommendation,
    RecommendationMeta,
    SourceStatus,
)
from transfer_advisor.domain.models.route_template import (
    RouteSegment,
    RouteTemplate,
    SegmentMode,
    StopVariant,
    TransferConfig,
)
from transfer_advisor.domain.models.train_candidate import TrainCandidate
from transfer_advisor.domain.models.transfer_option import RiskLevel, TransferOption
from transfer_advisor.domain.models.transfer_policy import EnginePolicy, ScoringPolicy
from transfer_advisor.domain.models.trip_detail import TripDetail, TripStop

__all__ = [
    "AccessibilityFeatures",
    "Departure",
    "EnginePolicy",
    "ErrorDetails",
    "LiveStatus",
    "Recommendation",
    "RecommendationMeta",
    "RiskLevel",
    "RouteSegment",
    "RouteTemplate",
    "ScoringPolicy",
    "SegmentMode",
    "SourceStatus",
    "StopVariant",
    "TrainCandidate",
    "TransferConfig",
    "TransferOption",
    "TransportMode",
    "TripDetail",
    "TripStop",
]
