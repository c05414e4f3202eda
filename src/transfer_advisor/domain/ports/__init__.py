"""Ports (interfaces) for the ports-and-adapters architecture."""

from transfer_advisor.domain.ports.departure_repository import DepartureRepository
from transfer_advisor.domain.ports.trip_repository import TripRepository

__all__ = [
    "DepartureRepository",
    "TripRepository",
]
