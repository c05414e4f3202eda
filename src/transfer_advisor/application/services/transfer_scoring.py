"""Risk classification, scoring and walk-time resolution for transfers."""

from collections.abc import Callable

from transfer_advisor.domain.models.route_template import TransferConfig
from transfer_advisor.domain.models.transfer_option import RiskLevel
from transfer_advisor.domain.models.transfer_policy import EnginePolicy, ScoringPolicy

SECONDS_PER_DAY = 86400


def classify_risk(
    buffer_sec: int,
    min_transfer_buffer_sec: int,
    train_has_live_data: bool,
    policy: ScoringPolicy,
) -> RiskLevel:
    """Classify how likely a transfer is to be missed.

    Without live train data a LOW transfer is downgraded to MED.
    """
    risk: RiskLevel
    if buffer_sec < min_transfer_buffer_sec:
        risk = "HIGH"
    elif buffer_sec <= policy.med_risk_threshold_sec:
        risk = "MED"
    else:
        risk = "LOW"

    if not train_has_live_data and risk == "LOW":
        risk = "MED"
    return risk


def compute_score(
    buffer_sec: int,
    risk: RiskLevel,
    train_has_live_data: bool,
    bus_has_live_data: bool,
    policy: ScoringPolicy,
) -> int:
    """Score a transfer; higher is better."""
    score = buffer_sec
    if not train_has_live_data:
        score -= policy.no_live_train_penalty
    if not bus_has_live_data:
        score -= policy.no_live_bus_penalty
    if risk == "HIGH":
        score -= policy.high_risk_penalty
    elif risk == "MED":
        score -= policy.med_risk_penalty
    return score


def resolve_walk_minutes(
    config: TransferConfig, line: str, variant: str | None
) -> float | None:
    """Look up walk minutes by ``line_variant``, ``lineVariant``, then ``line``.

    Returns None when no key matches.
    """
    keys = [f"{line}_{variant}", f"{line}{variant}"] if variant else []
    keys.append(line)
    for key in keys:
        if key in config.walk_times:
            return float(config.walk_times[key])
    return None


def adjust_for_midnight(bus_sec: int, ready_sec: int, policy: EnginePolicy) -> int:
    """Move an early-morning bus time past midnight when readiness is late at night."""
    if ready_sec > policy.wrap_ready_threshold_sec and bus_sec < policy.wrap_bus_threshold_sec:
        return bus_sec + SECONDS_PER_DAY
    return bus_sec


def service_day_order(times: list[int], policy: EnginePolicy) -> Callable[[int], int]:
    """Return a sort key that places early-morning times after late-night ones.

    Early-morning times only move past midnight when ``times`` also holds a
    late-night time, so a purely daytime set keeps its plain order.
    """
    spans_midnight = any(t > policy.wrap_ready_threshold_sec for t in times)

    def key(seconds: int) -> int:
        if spans_midnight and seconds < policy.wrap_bus_threshold_sec:
            return seconds + SECONDS_PER_DAY
        return seconds

    return key
