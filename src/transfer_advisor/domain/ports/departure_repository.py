"""Departure repository port."""

from typing import Protocol

from transfer_advisor.domain.models.departure import Departure


class DepartureRepository(Protocol):
    """Port for retrieving normalized departures per stop."""

    async def get_departures(self, stop_id: str, limit: int = 10) -> list[Departure]:
        """Get departures for a stop, ordered by effective time.

        Implementations never raise for upstream failures; they return stale
        cached data or an empty list instead.
        """
        ...
