"""Trip detail service: attaches live delays to a trip's stops."""

import asyncio
import itertools
import logging
from dataclasses import replace

from transfer_advisor.domain.models.trip_detail import TripDetail, TripStop
from transfer_advisor.domain.ports.departure_repository import DepartureRepository
from transfer_advisor.domain.ports.trip_repository import TripRepository

logger = logging.getLogger(__name__)


class TripDetailService:
    """Fetches a trip and estimates the live delay at each of its stops."""

    def __init__(
        self,
        trip_repository: TripRepository,
        departure_repository: DepartureRepository,
        workers: int = 4,
        departures_per_stop: int = 20,
    ) -> None:
        """Initialize the service.

        Args:
            trip_repository: Source of trip stop lists and paths.
            departure_repository: Source of per-stop departures used for delays.
            workers: Number of concurrent stop lookups.
            departures_per_stop: Departures requested per stop when looking for the trip.
        """
        self._trip_repository = trip_repository
        self._departure_repository = departure_repository
        self._workers = max(1, workers)
        self._departures_per_stop = departures_per_stop

    async def get_trip_with_delays(self, trip_id: str) -> TripDetail | None:
        """Get a trip with ``delay_sec`` filled in where a live departure was found."""
        trip = await self._trip_repository.get_trip(trip_id)
        if trip is None:
            return None
        if not trip.stops:
            return trip

        stops = await self._enrich_stops(trip.trip_id, trip.stops)
        return replace(trip, stops=stops)

    async def _enrich_stops(self, trip_id: str, stops: list[TripStop]) -> list[TripStop]:
        # Workers pull indices from the shared counter and write into their own slot.
        results: list[TripStop] = list(stops)
        counter = itertools.count()

        async def worker() -> None:
            while (index := next(counter)) < len(stops):
                results[index] = await self._enrich_stop(trip_id, stops[index])

        await asyncio.gather(*(worker() for _ in range(min(self._workers, len(stops)))))
        return results

    async def _enrich_stop(self, trip_id: str, stop: TripStop) -> TripStop:
        try:
            departures = await self._departure_repository.get_departures(
                stop.stop_id, limit=self._departures_per_stop
            )
        except Exception as e:
            logger.warning(f"Delay lookup for stop {stop.stop_id} failed: {e}")
            return stop

        for departure in departures:
            if departure.trip_id == trip_id:
                return replace(stop, delay_sec=departure.delay_sec)

        logger.debug(f"Trip {trip_id} not found in departures of stop {stop.stop_id}")
        return stop
