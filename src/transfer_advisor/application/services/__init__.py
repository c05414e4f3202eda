"""Application services."""

from transfer_advisor.application.services.candidate_builder import CandidateBuilder
from transfer_advisor.application.services.recommendation_engine import RecommendationEngine
from transfer_advisor.application.services.trip_detail_service import TripDetailService

__all__ = [
    "CandidateBuilder",
    "RecommendationEngine",
    "TripDetailService",
]
