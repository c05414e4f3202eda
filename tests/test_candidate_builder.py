"""Tests for CandidateBuilder."""

from tests.fakes import TRANSFER_STOP, make_bus, make_departure
from transfer_advisor.application.services import CandidateBuilder
from transfer_advisor.application.services.candidate_builder import (
    WARNING_NO_TRANSFER_MATCH,
    WARNING_NO_TRANSFER_STOP,
    WARNING_NO_TRIP_ID,
)


def _at_transfer(scheduled_sec: int, trip_id: str, live_sec: int | None = None):
    return make_departure(scheduled_sec, live_sec=live_sec, trip_id=trip_id, stop_id=TRANSFER_STOP)


class TestDirectionFiltering:
    """Tests for correlating boarding and transfer departures by trip id."""

    def test_keeps_only_trains_that_reach_the_transfer_stop(self) -> None:
        """Given two trains of which one reaches the transfer stop, then only that one is kept."""
        boarding = [
            make_departure(28800, trip_id="towards-city"),
            make_departure(29000, trip_id="towards-grodzisk"),
        ]
        transfer = [_at_transfer(29400, "towards-city")]

        candidates = CandidateBuilder().build(boarding, transfer)

        assert [c.train.trip_id for c in candidates] == ["towards-city"]
        assert candidates[0].transfer == transfer[0]
        assert candidates[0].transfer_time_sec == 29400
        assert candidates[0].warnings == []

    def test_transfer_time_uses_live_arrival(self) -> None:
        """Given a delayed arrival at the transfer stop, then the live time is used."""
        boarding = [make_departure(28800, trip_id="T1")]
        transfer = [_at_transfer(29400, "T1", live_sec=29520)]

        candidates = CandidateBuilder().build(boarding, transfer)

        assert candidates[0].transfer_time_sec == 29520

    def test_train_without_trip_id_is_kept_with_warnings(self) -> None:
        """Given a boarding train without trip id, then it is kept and flagged as unverified."""
        boarding = [make_departure(28800, live_sec=28830, trip_id=None)]
        transfer = [_at_transfer(29400, "other")]

        candidates = CandidateBuilder().build(boarding, transfer)

        assert len(candidates) == 1
        assert candidates[0].transfer is None
        assert candidates[0].transfer_time_sec == 28830
        assert candidates[0].warnings == [WARNING_NO_TRIP_ID, WARNING_NO_TRANSFER_MATCH]

    def test_no_filtering_when_transfer_stop_has_no_trip_ids(self) -> None:
        """Given transfer departures without trip ids, then every train is kept with a warning."""
        boarding = [make_departure(28800, trip_id="T1"), make_departure(29400, trip_id="T2")]
        transfer = [_at_transfer(29400, None)]  # type: ignore[arg-type]

        candidates = CandidateBuilder().build(boarding, transfer)

        assert [c.train.trip_id for c in candidates] == ["T1", "T2"]
        assert all(c.warnings == [WARNING_NO_TRANSFER_MATCH] for c in candidates)

    def test_without_transfer_stop_uses_boarding_time(self) -> None:
        """Given no transfer stop configured, then candidates use boarding time and a warning."""
        boarding = [make_departure(28800, live_sec=28900, trip_id="T1")]

        candidates = CandidateBuilder().build(boarding, [], transfer_stop_configured=False)

        assert candidates[0].transfer_time_sec == 28900
        assert candidates[0].warnings == [WARNING_NO_TRANSFER_STOP]

    def test_first_transfer_departure_per_trip_wins(self) -> None:
        """Given a trip listed twice at the transfer stop, then the first record is used."""
        boarding = [make_departure(28800, trip_id="T1")]
        transfer = [_at_transfer(29400, "T1"), _at_transfer(33000, "T1")]

        candidates = CandidateBuilder().build(boarding, transfer)

        assert candidates[0].transfer_time_sec == 29400


class TestSelection:
    """Tests for mode, line filtering and ordering."""

    def test_ignores_non_train_departures_and_disallowed_lines(self) -> None:
        """Given buses and other lines at the boarding stop, then only allowed trains remain."""
        boarding = [
            make_departure(28800, trip_id="T1"),
            make_bus(28700),
            make_departure(28900, trip_id="T2", route_id="A1"),
        ]

        candidates = CandidateBuilder().build(
            boarding, [], allowed_route_ids=["WKD"], transfer_stop_configured=False
        )

        assert [c.train.trip_id for c in candidates] == ["T1"]

    def test_sorted_by_effective_time_and_not_truncated(self) -> None:
        """Given unordered trains, then candidates are ordered by live-or-scheduled time."""
        boarding = [
            make_departure(29000, trip_id="late"),
            make_departure(28800, live_sec=29100, trip_id="delayed"),
            make_departure(28900, trip_id="early"),
        ]

        candidates = CandidateBuilder().build(boarding, [], transfer_stop_configured=False)

        assert [c.train.trip_id for c in candidates] == ["early", "late", "delayed"]

    def test_rides_after_midnight_follow_late_night_rides(self) -> None:
        """Given trains at 00:10 and 23:50, then the 23:50 train comes first."""
        boarding = [make_departure(600, trip_id="T0010"), make_departure(85800, trip_id="T2350")]

        candidates = CandidateBuilder().build(boarding, [], transfer_stop_configured=False)

        assert [c.train.trip_id for c in candidates] == ["T2350", "T0010"]
