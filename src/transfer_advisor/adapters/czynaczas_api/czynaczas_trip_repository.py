"""Trip repository adapter for the czynaczas.pl trip API."""

import logging

from transfer_advisor.adapters.czynaczas_api.czynaczas_departure_repository import (
    describe_upstream_error,
)
from transfer_advisor.adapters.czynaczas_api.http_client import CzynaczasHttpClient
from transfer_advisor.adapters.czynaczas_api.trip_parser import TripParser
from transfer_advisor.domain.contracts.ttl_cache import TtlCacheProtocol
from transfer_advisor.domain.errors import UpstreamError
from transfer_advisor.domain.models.trip_detail import TripDetail
from transfer_advisor.domain.ports.trip_repository import TripRepository

logger = logging.getLogger(__name__)


class CzynaczasTripRepository(TripRepository):
    """Cached trip detail source. Used for display only, never for ranking."""

    def __init__(
        self, http_client: CzynaczasHttpClient, cache: TtlCacheProtocol[TripDetail]
    ) -> None:
        """Initialize with an HTTP client and a trip cache of its own."""
        self._http_client = http_client
        self._cache = cache

    async def get_trip(self, trip_id: str) -> TripDetail | None:
        """Get trip details, falling back to a stale entry when the API fails."""
        cached = self._cache.get(trip_id)
        if cached is not None:
            logger.debug(f"Cache hit for trip {trip_id}")
            return cached

        logger.info(f"Fetching trip {trip_id}")
        try:
            data = await self._http_client.fetch_trip(trip_id)
        except UpstreamError as e:
            details = describe_upstream_error(e, f"trip {trip_id}")
            stale = self._cache.get_stale(trip_id)
            if stale is not None:
                logger.warning(f"Serving stale trip after error: {details.describe()}")
            else:
                logger.error(f"Trip unavailable: {details.describe()}")
            return stale

        trip = TripParser.parse_trip(trip_id, data)
        self._cache.set(trip_id, trip)
        return trip
