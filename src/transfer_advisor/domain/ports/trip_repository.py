"""Trip repository port."""

from typing import Protocol

from transfer_advisor.domain.models.trip_detail import TripDetail


class TripRepository(Protocol):
    """Port for retrieving a single trip's stops and path."""

    async def get_trip(self, trip_id: str) -> TripDetail | None:
        """Get trip details, or None when the trip cannot be retrieved."""
        ...
