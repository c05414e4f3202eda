"""HTTP client for czynaczas.pl API requests.

Every request carries its own timeout. Timeouts, transport errors, non-200
responses and undecodable or wrongly shaped bodies are retried with exponential
backoff; once all attempts are used an UpstreamError is raised for the
repository to handle.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import aiohttp

from transfer_advisor.adapters.api_request_logger import log_api_request, log_api_response
from transfer_advisor.adapters.czynaczas_api.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_HEADERS,
    TIMETABLE_PATH,
    TRIP_PATH,
)
from transfer_advisor.domain.errors import UpstreamError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


class CzynaczasHttpClient:
    """HTTP client for the czynaczas.pl timetable and trip endpoints."""

    def __init__(
        self,
        session: "ClientSession",
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 3.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.25,
    ) -> None:
        """Initialize the client.

        Args:
            session: aiohttp session shared by the application.
            base_url: API base URL, without trailing slash.
            timeout_seconds: Timeout of a single attempt.
            max_attempts: Attempts per request before giving up.
            backoff_seconds: Delay before the first retry; doubled for each further one.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds

    def timetable_url(self, stop_id: str) -> str:
        return f"{self._base_url}/{TIMETABLE_PATH}/{stop_id}"

    def trip_url(self, trip_id: str) -> str:
        return f"{self._base_url}/{TRIP_PATH}/{trip_id}"

    async def fetch_timetable(self, stop_id: str, limit: int) -> list[Any]:
        """Fetch raw timetable records for a stop.

        Args:
            stop_id: Upstream stop identifier (e.g. "wkd_wrako" or "701301").
            limit: Number of records to request.

        Returns:
            The raw record list.

        Raises:
            UpstreamError: If every attempt failed or never returned a record list.
        """

        def extract(data: Any) -> list[Any]:
            records = self._extract_records(data)
            if records is None:
                raise UpstreamError(f"Malformed timetable body for stop {stop_id}")
            return records

        url = self.timetable_url(stop_id)
        return await self.fetch_json(url, params={"limit": limit}, extract=extract)

    async def fetch_trip(self, trip_id: str) -> dict[str, Any]:
        """Fetch the raw trip object for a trip id.

        Raises:
            UpstreamError: If every attempt failed or never returned an object.
        """

        def extract(data: Any) -> dict[str, Any]:
            if not isinstance(data, dict):
                raise UpstreamError(f"Malformed trip body for trip {trip_id}")
            return data

        return await self.fetch_json(self.trip_url(trip_id), extract=extract)

    @staticmethod
    def _extract_records(data: Any) -> list[Any] | None:
        """Extract the record list from a list body or a ``departures`` object."""
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            departures = data.get("departures")
            return departures if isinstance(departures, list) else None
        return None

    def _backoff_delay(self, attempt: int) -> float:
        return self._backoff_seconds * (2 ** (attempt - 1))

    async def fetch_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        extract: Callable[[Any], Any] | None = None,
    ) -> Any:
        """GET a JSON document, retrying transient failures.

        Args:
            url: Absolute URL to request.
            params: Query parameters.
            extract: Applied to each decoded body; raising UpstreamError from it
                counts as a failed attempt.

        Raises:
            UpstreamError: After the last failed attempt.
        """
        last_error: UpstreamError | None = None

        for attempt in range(1, self._max_attempts + 1):
            log_api_request("GET", url, params, attempt=attempt)
            started = time.monotonic()
            try:
                async with self._session.get(
                    url, params=params, headers=DEFAULT_HEADERS, timeout=self._timeout
                ) as response:
                    log_api_response(url, response.status, time.monotonic() - started, attempt)
                    data = await self._read_json(response, url)
                return extract(data) if extract is not None else data
            except UpstreamError as e:
                last_error = e
            except TimeoutError:
                last_error = UpstreamError(f"Timed out requesting {url}")
            except aiohttp.ClientError as e:
                last_error = UpstreamError(f"Request to {url} failed: {e}")
            except ValueError as e:
                last_error = UpstreamError(f"Invalid JSON from {url}: {e}")

            logger.warning(f"Attempt {attempt}/{self._max_attempts} failed: {last_error}")
            if attempt < self._max_attempts:
                await asyncio.sleep(self._backoff_delay(attempt))

        logger.error(f"Giving up on {url} after {self._max_attempts} attempt(s)")
        raise last_error or UpstreamError(f"No attempt made for {url}")

    async def _read_json(self, response: "ClientResponse", url: str) -> Any:
        """Decode a successful response body or raise for an error status."""
        if response.status != 200:
            response_text = await response.text()
            raise UpstreamError(
                f"API returned status {response.status} for {url}: {response_text[:200]}",
                status_code=response.status,
            )
        return await response.json(content_type=None)
