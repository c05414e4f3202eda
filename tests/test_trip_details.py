"""Tests for trip parsing, the trip repository and live delay enrichment."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fakes import FakeClock, StaticDepartureRepository, StaticTripRepository, make_departure
from transfer_advisor.adapters.cache import TtlCache
from transfer_advisor.adapters.czynaczas_api import CzynaczasTripRepository
from transfer_advisor.adapters.czynaczas_api.trip_parser import TripParser
from transfer_advisor.application.services import TripDetailService
from transfer_advisor.domain.errors import UpstreamError
from transfer_advisor.domain.models import Departure, TripDetail, TripStop

RAW_TRIP = {
    "trip_id": "WKD_0800",
    "stops": [
        {
            "stop_id": "wkd_wsrod",
            "name": "Warszawa Srodmiescie",
            "lat": 52.23,
            "lon": 21.01,
            "sequence": 3,
            "departure_time": 29400,
        },
        {
            "id": "wkd_wrako",
            "stop_name": "Warszawa Rakow",
            "latitude": "52.19",
            "longitude": "20.93",
            "stop_sequence": 1,
            "scheduled_time": 28800,
        },
        {"name": "no id"},
    ],
    "shape": [[52.19, 20.93], {"lat": 52.21, "lon": 20.97}, [52.23, 21.01]],
}


def _stop(stop_id: str, sequence: int) -> TripStop:
    return TripStop(
        stop_id=stop_id,
        name=stop_id,
        latitude=52.2,
        longitude=21.0,
        sequence=sequence,
        scheduled_sec=28800 + sequence * 120,
    )


class TestTripParser:
    """Tests for TripParser."""

    def test_parses_stops_in_sequence_order(self) -> None:
        trip = TripParser.parse_trip("WKD_0800", RAW_TRIP)

        assert [s.stop_id for s in trip.stops] == ["wkd_wrako", "wkd_wsrod"]
        first = trip.stops[0]
        assert first.name == "Warszawa Rakow"
        assert first.latitude == pytest.approx(52.19)
        assert first.scheduled_sec == 28800
        assert first.delay_sec is None

    def test_parses_shape_pairs_and_objects(self) -> None:
        trip = TripParser.parse_trip("WKD_0800", RAW_TRIP)

        assert trip.shape == [(52.19, 20.93), (52.21, 20.97), (52.23, 21.01)]

    def test_missing_stops_gives_empty_trip(self) -> None:
        trip = TripParser.parse_trip("T9", {})

        assert trip == TripDetail(trip_id="T9", stops=[], shape=[])


class TestCzynaczasTripRepository:
    """Tests for the cached trip repository."""

    @pytest.mark.asyncio
    async def test_caches_trip(self) -> None:
        http_client = MagicMock()
        http_client.fetch_trip = AsyncMock(return_value=RAW_TRIP)
        repository = CzynaczasTripRepository(http_client, TtlCache(30, clock=FakeClock()))

        first = await repository.get_trip("WKD_0800")
        second = await repository.get_trip("WKD_0800")

        assert first is second
        assert http_client.fetch_trip.await_count == 1

    @pytest.mark.asyncio
    async def test_returns_none_when_unavailable(self) -> None:
        http_client = MagicMock()
        http_client.fetch_trip = AsyncMock(side_effect=UpstreamError("down"))
        repository = CzynaczasTripRepository(http_client, TtlCache(30))

        assert await repository.get_trip("WKD_0800") is None


class TestTripDetailService:
    """Tests for attaching live delays to trip stops."""

    @pytest.mark.asyncio
    async def test_attaches_delay_where_trip_is_found(self) -> None:
        """Given live departures of the trip at some stops, then those stops get a delay."""
        trip = TripDetail(trip_id="T1", stops=[_stop("a", 1), _stop("b", 2), _stop("c", 3)])
        departures = StaticDepartureRepository(
            {
                "a": [make_departure(28920, live_sec=28980, trip_id="T1", stop_id="a")],
                "b": [make_departure(29040, live_sec=29000, trip_id="other", stop_id="b")],
                "c": [make_departure(29160, live_sec=29280, trip_id="T1", stop_id="c")],
            }
        )
        service = TripDetailService(StaticTripRepository({"T1": trip}), departures, workers=2)

        result = await service.get_trip_with_delays("T1")

        assert result is not None
        assert [s.delay_sec for s in result.stops] == [60, None, 120]
        assert [s.stop_id for s in result.stops] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_failing_stop_does_not_abort_others(self) -> None:
        trip = TripDetail(trip_id="T1", stops=[_stop("a", 1), _stop("b", 2)])
        departures = StaticDepartureRepository(
            {"b": [make_departure(29040, live_sec=29100, trip_id="T1", stop_id="b")]},
            failing_stops={"a"},
        )
        service = TripDetailService(StaticTripRepository({"T1": trip}), departures)

        result = await service.get_trip_with_delays("T1")

        assert result is not None
        assert [s.delay_sec for s in result.stops] == [None, 60]

    @pytest.mark.asyncio
    async def test_lookups_are_bounded_by_worker_count(self) -> None:
        """Given 6 stops and 2 workers, then at most 2 stop lookups run at once."""
        in_flight = 0
        peak = 0

        class SlowRepository:
            async def get_departures(
                self,
                stop_id: str,  # noqa: ARG002
                limit: int = 10,  # noqa: ARG002
            ) -> list[Departure]:
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0)
                in_flight -= 1
                return []

        trip = TripDetail(trip_id="T1", stops=[_stop(str(i), i) for i in range(6)])
        service = TripDetailService(
            StaticTripRepository({"T1": trip}), SlowRepository(), workers=2
        )

        result = await service.get_trip_with_delays("T1")

        assert result is not None
        assert len(result.stops) == 6
        assert peak == 2

    @pytest.mark.asyncio
    async def test_unknown_trip(self) -> None:
        service = TripDetailService(StaticTripRepository({}), StaticDepartureRepository({}))

        assert await service.get_trip_with_delays("missing") is None
