"""Recommendation engine: matches train arrivals to bus departures and ranks the transfers."""

import asyncio
import logging
from collections.abc import Callable, Hashable
from datetime import UTC, datetime

from transfer_advisor.application.services.candidate_builder import CandidateBuilder
from transfer_advisor.application.services.transfer_scoring import (
    adjust_for_midnight,
    classify_risk,
    compute_score,
    resolve_walk_minutes,
    service_day_order,
)
from transfer_advisor.domain.errors import RouteTemplateError
from transfer_advisor.domain.models.departure import Departure
from transfer_advisor.domain.models.recommendation import (
    LiveStatus,
    Recommendation,
    RecommendationMeta,
    SourceStatus,
)
from transfer_advisor.domain.models.route_template import (
    RouteSegment,
    RouteTemplate,
    TransferConfig,
)
from transfer_advisor.domain.models.train_candidate import TrainCandidate
from transfer_advisor.domain.models.transfer_option import TransferOption
from transfer_advisor.domain.models.transfer_policy import EnginePolicy, ScoringPolicy
from transfer_advisor.domain.ports.departure_repository import DepartureRepository

logger = logging.getLogger(__name__)

WARNING_NO_LIVE_TRAIN = "no live data for train"


def _ride_key(departure: Departure) -> Hashable:
    """Identity of the physical vehicle run behind a departure."""
    if departure.trip_id:
        return ("trip", departure.trip_id)
    return (
        "scheduled",
        departure.route_id,
        departure.stop_id,
        departure.date,
        departure.scheduled_sec,
    )


def _status(departures: list[Departure]) -> SourceStatus:
    return "available" if departures else "unavailable"


class RecommendationEngine:
    """Computes ranked train -> bus transfer options for a route template."""

    def __init__(
        self,
        departure_repository: DepartureRepository,
        candidate_builder: CandidateBuilder | None = None,
        scoring_policy: ScoringPolicy | None = None,
        engine_policy: EnginePolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            departure_repository: Source of normalized departures per stop.
            candidate_builder: Builder for train candidates.
            scoring_policy: Risk thresholds and score penalties.
            engine_policy: Matching bounds and midnight wraparound thresholds.
            clock: Source of the generation timestamp, injectable for tests.
        """
        self._departure_repository = departure_repository
        self._scoring = scoring_policy or ScoringPolicy()
        self._policy = engine_policy or EnginePolicy()
        self._candidate_builder = candidate_builder or CandidateBuilder(self._policy)
        self._clock = clock or (lambda: datetime.now(UTC))

    async def get_recommendations(self, template: RouteTemplate, limit: int = 5) -> Recommendation:
        """Get ranked transfer options for a template.

        Args:
            template: Resolved route template snapshot.
            limit: Maximum number of distinct train rides in the result.

        Returns:
            Ranked options and upstream availability metadata.

        Raises:
            RouteTemplateError: If the template lacks a TRAIN or BUS segment, or
                the TRAIN segment has no boarding stop.
        """
        train_segment, bus_segment = self._required_segments(template)
        boarding_stop = train_segment.from_stop_id
        if not boarding_stop:
            raise RouteTemplateError("TRAIN segment has no boarding stop (from_stop_id)")
        transfer_stop = train_segment.to_stop_id
        bus_stops = bus_segment.all_stop_ids()

        requests = {boarding_stop: self._policy.train_fetch_limit}
        if transfer_stop:
            requests[transfer_stop] = max(
                requests.get(transfer_stop, 0), self._policy.train_fetch_limit
            )
        for stop_id in bus_stops:
            requests[stop_id] = max(requests.get(stop_id, 0), self._policy.bus_fetch_limit)

        departures_by_stop = await self._fetch_all(requests)

        boarding = departures_by_stop.get(boarding_stop, [])
        transfer = departures_by_stop.get(transfer_stop, []) if transfer_stop else []
        train_stops = [boarding_stop] + ([transfer_stop] if transfer_stop else [])

        stop_status = {stop_id: _status(deps) for stop_id, deps in departures_by_stop.items()}
        live_status = LiveStatus(
            train_source=self._combined_status(stop_status, train_stops),
            bus_source=self._combined_status(stop_status, bus_stops),
            stop_status=stop_status,
        )

        candidates = self._candidate_builder.build(
            boarding,
            transfer,
            allowed_route_ids=train_segment.allowed_route_ids,
            transfer_stop_configured=bool(transfer_stop),
        )
        candidates = candidates[: self._policy.max_train_candidates]

        options = self.compute_options(
            candidates, bus_segment, departures_by_stop, template.transfer_config
        )
        ranked = self.rank_options(options, limit)

        logger.info(
            f"Template {template.template_id}: {len(candidates)} train candidate(s), "
            f"{len(options)} option(s), {len(ranked)} returned"
        )

        return Recommendation(
            options=ranked,
            meta=RecommendationMeta(
                template_id=template.template_id,
                timestamp=self._clock().isoformat(),
                live_status=live_status,
            ),
        )

    @staticmethod
    def _required_segments(template: RouteTemplate) -> tuple[RouteSegment, RouteSegment]:
        train_segment = template.segment("TRAIN")
        bus_segment = template.segment("BUS")
        if train_segment is None or bus_segment is None:
            raise RouteTemplateError(
                f"Route template {template.template_id} must have both TRAIN and BUS segments"
            )
        return train_segment, bus_segment

    @staticmethod
    def _combined_status(
        stop_status: dict[str, SourceStatus], stop_ids: list[str]
    ) -> SourceStatus:
        if not stop_ids:
            return "unavailable"
        if all(stop_status.get(stop_id) == "available" for stop_id in stop_ids):
            return "available"
        return "unavailable"

    async def _fetch_all(self, requests: dict[str, int]) -> dict[str, list[Departure]]:
        """Fetch every stop concurrently; a failing stop contributes no departures."""
        stop_ids = list(requests)
        results = await asyncio.gather(
            *(
                self._departure_repository.get_departures(stop_id, limit=requests[stop_id])
                for stop_id in stop_ids
            ),
            return_exceptions=True,
        )

        departures_by_stop: dict[str, list[Departure]] = {}
        for stop_id, result in zip(stop_ids, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(f"Departure fetch for stop {stop_id} failed: {result}")
                departures_by_stop[stop_id] = []
            else:
                departures_by_stop[stop_id] = result
        return departures_by_stop

    def compute_options(
        self,
        candidates: list[TrainCandidate],
        bus_segment: RouteSegment,
        departures_by_stop: dict[str, list[Departure]],
        config: TransferConfig,
    ) -> list[TransferOption]:
        """Evaluate every candidate against every allowed bus line and stop variant."""
        options: list[TransferOption] = []
        for candidate in candidates:
            for line in bus_segment.allowed_route_ids:
                for stop_variant in bus_segment.variants_for_line(line):
                    option = self._evaluate(
                        candidate,
                        line,
                        stop_variant.variant,
                        departures_by_stop.get(stop_variant.stop_id, []),
                        config,
                    )
                    if option is not None:
                        options.append(option)
        return options

    def _evaluate(
        self,
        candidate: TrainCandidate,
        line: str,
        variant: str | None,
        stop_departures: list[Departure],
        config: TransferConfig,
    ) -> TransferOption | None:
        warnings = list(candidate.warnings)

        walk_minutes = resolve_walk_minutes(config, line, variant)
        if walk_minutes is None:
            walk_minutes = self._policy.default_walk_minutes
            label = f"{line}_{variant}" if variant else line
            warnings.append(
                f"no walk time configured for {label}; assuming {walk_minutes:g} min"
            )
        walk_sec = round(walk_minutes * 60)
        ready_sec = candidate.transfer_time_sec + config.exit_buffer_sec + walk_sec

        match = self._first_bus_after(stop_departures, line, ready_sec)
        if match is None:
            return None
        bus, bus_sec = match

        train = candidate.train
        buffer_sec = bus_sec - ready_sec
        risk = classify_risk(
            buffer_sec, config.min_transfer_buffer_sec, train.has_live_data, self._scoring
        )
        score = compute_score(
            buffer_sec, risk, train.has_live_data, bus.has_live_data, self._scoring
        )

        if not train.has_live_data:
            warnings.append(WARNING_NO_LIVE_TRAIN)
        if not bus.has_live_data:
            warnings.append(f"no live data for bus line {line}")

        return TransferOption(
            option_id=f"{train.scheduled_sec}_{line}_{variant or 'X'}_{bus.scheduled_sec}",
            train=train,
            train_transfer=candidate.transfer,
            train_transfer_time_sec=candidate.transfer_time_sec,
            bus=bus,
            bus_stop_variant=variant,
            walk_sec=walk_sec,
            exit_buffer_sec=config.exit_buffer_sec,
            min_transfer_buffer_sec=config.min_transfer_buffer_sec,
            ready_sec=ready_sec,
            buffer_sec=buffer_sec,
            risk=risk,
            score=score,
            warnings=warnings,
        )

    def _first_bus_after(
        self, stop_departures: list[Departure], line: str, ready_sec: int
    ) -> tuple[Departure, int] | None:
        """Earliest departure of ``line`` at or after ``ready_sec``, with its adjusted time."""
        best: tuple[Departure, int] | None = None
        for departure in stop_departures:
            if departure.route_id != line:
                continue
            bus_sec = adjust_for_midnight(departure.effective_sec, ready_sec, self._policy)
            if bus_sec < ready_sec:
                continue
            if best is None or bus_sec < best[1]:
                best = (departure, bus_sec)
        return best

    def rank_options(self, options: list[TransferOption], limit: int) -> list[TransferOption]:
        """Deduplicate, cap per train ride and order the options.

        Keeps the best option per (train ride, bus ride, variant), then the top
        ``max_options_per_ride`` per train ride. Orders by train departure
        (rides just after midnight follow late-night ones), then score, then
        bus departure, and keeps the first ``limit`` train rides.
        """
        best_per_pair: dict[Hashable, TransferOption] = {}
        for option in options:
            key = (_ride_key(option.train), _ride_key(option.bus), option.bus_stop_variant)
            current = best_per_pair.get(key)
            if current is None or option.score > current.score:
                best_per_pair[key] = option

        by_ride: dict[Hashable, list[TransferOption]] = {}
        for option in best_per_pair.values():
            by_ride.setdefault(_ride_key(option.train), []).append(option)

        kept: list[TransferOption] = []
        for ride_options in by_ride.values():
            ride_options.sort(key=lambda o: (-o.score, o.ready_sec + o.buffer_sec))
            kept.extend(ride_options[: self._policy.max_options_per_ride])

        order = service_day_order([o.train.effective_sec for o in kept], self._policy)
        kept.sort(
            key=lambda o: (
                order(o.train.effective_sec),
                -o.score,
                o.ready_sec + o.buffer_sec,
                o.option_id,
            )
        )

        result: list[TransferOption] = []
        rides: list[Hashable] = []
        for option in kept:
            ride = _ride_key(option.train)
            if ride not in rides:
                if len(rides) >= limit:
                    continue
                rides.append(ride)
            result.append(option)
        return result
