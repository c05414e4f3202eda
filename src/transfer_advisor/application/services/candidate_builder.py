"""Builds train candidates by correlating boarding and transfer-stop departures."""

import logging

from transfer_advisor.application.services.transfer_scoring import service_day_order
from transfer_advisor.domain.models.departure import Departure
from transfer_advisor.domain.models.train_candidate import TrainCandidate
from transfer_advisor.domain.models.transfer_policy import EnginePolicy

logger = logging.getLogger(__name__)

WARNING_NO_TRIP_ID = "train has no trip id; direction to the transfer stop not verified"
WARNING_NO_TRANSFER_MATCH = (
    "train not found at the transfer stop; transfer time estimated from boarding time"
)
WARNING_NO_TRANSFER_STOP = "no transfer stop configured; transfer time taken from boarding time"


class CandidateBuilder:
    """Correlates a train ride's boarding departure with its arrival at the transfer point."""

    def __init__(self, policy: EnginePolicy | None = None) -> None:
        self._policy = policy or EnginePolicy()

    def build(
        self,
        boarding: list[Departure],
        transfer: list[Departure],
        allowed_route_ids: list[str] | None = None,
        transfer_stop_configured: bool = True,
    ) -> list[TrainCandidate]:
        """Build train candidates ordered by boarding effective time.

        Rides just after midnight sort after late-night rides of the same night.

        When a transfer stop is configured and any transfer departure carries a
        trip id, boarding departures whose trip does not reach the transfer stop
        are dropped. Boarding departures without a trip id are kept with a
        warning.

        Args:
            boarding: Departures at the train boarding stop.
            transfer: Departures at the train transfer stop.
            allowed_route_ids: Train lines allowed on this leg; empty allows all.
            transfer_stop_configured: Whether the template names a transfer stop.

        Returns:
            All retained candidates, untruncated.
        """
        allowed = set(allowed_route_ids or [])
        trains = [
            d
            for d in boarding
            if d.mode == "TRAIN" and (not allowed or d.route_id in allowed)
        ]

        by_trip: dict[str, Departure] = {}
        for departure in transfer:
            if departure.mode == "TRAIN" and departure.trip_id and departure.trip_id not in by_trip:
                by_trip[departure.trip_id] = departure

        filter_by_direction = transfer_stop_configured and bool(by_trip)

        candidates: list[TrainCandidate] = []
        dropped = 0
        for train in trains:
            if filter_by_direction and train.trip_id and train.trip_id not in by_trip:
                dropped += 1
                continue
            candidates.append(self._build_candidate(train, by_trip, transfer_stop_configured))

        if dropped:
            logger.debug(f"Dropped {dropped} train(s) not continuing to the transfer stop")

        order = service_day_order([c.train.effective_sec for c in candidates], self._policy)
        candidates.sort(key=lambda c: order(c.train.effective_sec))
        return candidates

    @staticmethod
    def _build_candidate(
        train: Departure,
        by_trip: dict[str, Departure],
        transfer_stop_configured: bool,
    ) -> TrainCandidate:
        warnings: list[str] = []
        matched = by_trip.get(train.trip_id) if train.trip_id else None

        if matched is not None:
            return TrainCandidate(
                train=train,
                transfer=matched,
                transfer_time_sec=matched.effective_sec,
                warnings=warnings,
            )

        if not transfer_stop_configured:
            warnings.append(WARNING_NO_TRANSFER_STOP)
        elif not train.trip_id and by_trip:
            warnings.append(WARNING_NO_TRIP_ID)
            warnings.append(WARNING_NO_TRANSFER_MATCH)
        else:
            warnings.append(WARNING_NO_TRANSFER_MATCH)

        return TrainCandidate(
            train=train,
            transfer=None,
            transfer_time_sec=train.effective_sec,
            warnings=warnings,
        )
