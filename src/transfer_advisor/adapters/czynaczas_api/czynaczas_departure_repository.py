"""Departure repository adapter for the czynaczas.pl timetable API."""

import logging
from dataclasses import dataclass

from transfer_advisor.adapters.czynaczas_api.departure_parser import DepartureParser
from transfer_advisor.adapters.czynaczas_api.http_client import CzynaczasHttpClient
from transfer_advisor.domain.contracts.ttl_cache import TtlCacheProtocol
from transfer_advisor.domain.errors import UpstreamError
from transfer_advisor.domain.models.departure import Departure
from transfer_advisor.domain.models.error_details import ErrorDetails
from transfer_advisor.domain.ports.departure_repository import DepartureRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StopTimetable:
    """Departures cached for a stop and how many records were requested for them."""

    departures: list[Departure]
    requested: int

    def covers(self, limit: int) -> bool:
        """Whether this entry can answer a request for ``limit`` departures.

        A response shorter than the request holds every upcoming departure.
        """
        return limit <= self.requested or len(self.departures) < self.requested


def describe_upstream_error(error: UpstreamError, resource: str) -> ErrorDetails:
    """Summarize an upstream failure of ``resource`` for logging."""
    status_code = error.status_code
    if status_code == 429:
        reason = "Rate limit exceeded"
    elif status_code == 502:
        reason = "Bad gateway (server error)"
    elif status_code == 503:
        reason = "Service unavailable"
    elif status_code == 504:
        reason = "Gateway timeout"
    elif status_code is not None:
        reason = "Unexpected status"
    else:
        reason = str(error) or "Unknown error"
    return ErrorDetails(resource=resource, reason=reason, status_code=status_code)


class CzynaczasDepartureRepository(DepartureRepository):
    """Cached, retrying departure source for czynaczas.pl stops."""

    def __init__(
        self,
        http_client: CzynaczasHttpClient,
        cache: TtlCacheProtocol[StopTimetable],
        fetch_size: int = 20,
    ) -> None:
        """Initialize the repository.

        Args:
            http_client: Client used for upstream requests.
            cache: Per-stop cache of normalized departures, shared across requests.
            fetch_size: Minimum number of departures requested from the API.
        """
        self._http_client = http_client
        self._cache = cache
        self._fetch_size = fetch_size

    async def get_departures(self, stop_id: str, limit: int = 10) -> list[Departure]:
        """Get departures for a stop, ordered by effective time.

        Serves fresh cache entries without a network call unless the entry was
        filled by a smaller request than ``limit``. On upstream failure the
        last cached entry is returned even if expired, else an empty list.

        Args:
            stop_id: Upstream stop identifier.
            limit: Maximum number of departures to return.

        Returns:
            Up to ``limit`` departures sorted by effective time.
        """
        cached = self._cache.get(stop_id)
        if cached is not None and cached.covers(limit):
            logger.debug(f"Cache hit for stop {stop_id} ({len(cached.departures)} departures)")
            return cached.departures[:limit]

        logger.info(f"Fetching departures for stop {stop_id}")
        requested = max(limit, self._fetch_size)
        try:
            records = await self._http_client.fetch_timetable(stop_id, limit=requested)
        except UpstreamError as e:
            details = describe_upstream_error(e, f"stop {stop_id}")
            stale = self._cache.get_stale(stop_id)
            if stale is not None:
                logger.warning(f"Serving stale departures after error: {details.describe()}")
                return stale.departures[:limit]
            logger.error(f"No departures available: {details.describe()}")
            return []

        departures = DepartureParser.parse_departures(records)
        self._cache.set(stop_id, StopTimetable(departures=departures, requested=requested))
        logger.debug(f"Fetched {len(departures)} departures for stop {stop_id}")
        return departures[:limit]
