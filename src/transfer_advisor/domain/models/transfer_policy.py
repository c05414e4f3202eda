"""Tunable policy for matching and ranking transfers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringPolicy:
    """Thresholds and penalties of the risk model."""

    med_risk_threshold_sec: int = 300
    no_live_train_penalty: int = 120
    no_live_bus_penalty: int = 60
    high_risk_penalty: int = 300
    med_risk_penalty: int = 100


@dataclass(frozen=True)
class EnginePolicy:
    """Bounds on how much work one recommendation does."""

    max_train_candidates: int = 8
    max_options_per_ride: int = 4
    default_walk_minutes: float = 5.0
    train_fetch_limit: int = 20
    bus_fetch_limit: int = 30
    wrap_ready_threshold_sec: int = 80000  # ~22:13
    wrap_bus_threshold_sec: int = 10000  # ~02:46
