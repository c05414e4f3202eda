"""12-factor configuration adapter using environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transfer_advisor.adapters.czynaczas_api.constants import DEFAULT_BASE_URL
from transfer_advisor.domain.models.transfer_policy import EnginePolicy, ScoringPolicy


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream API configuration
    api_base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base URL of the czynaczas.pl API"
    )
    request_timeout_seconds: float = Field(
        default=3.0, description="Timeout for a single upstream request attempt in seconds"
    )
    max_attempts: int = Field(
        default=3, description="Upstream attempts per fetch before falling back to cache"
    )
    retry_backoff_seconds: float = Field(
        default=0.25,
        description="Delay before the first retry; doubles with every further attempt",
    )
    departure_cache_ttl_seconds: float = Field(
        default=15.0, description="How long fetched departures are served from cache"
    )
    trip_cache_ttl_seconds: float = Field(
        default=30.0, description="How long fetched trip details are served from cache"
    )
    departure_fetch_size: int = Field(
        default=20, description="Minimum number of departures requested per stop"
    )
    train_fetch_limit: int = Field(
        default=20, description="Departures fetched for train boarding and transfer stops"
    )
    bus_fetch_limit: int = Field(default=30, description="Departures fetched per bus stop")
    trip_enrichment_workers: int = Field(
        default=4, description="Concurrent stop lookups when attaching live delays to a trip"
    )

    # Matching and ranking
    max_train_candidates: int = Field(
        default=8, description="Earliest train rides evaluated per recommendation"
    )
    max_options_per_ride: int = Field(
        default=4, description="Alternatives kept per train ride"
    )
    default_walk_minutes: float = Field(
        default=5.0, description="Walk time used when a line has no configured walk time"
    )
    med_risk_threshold_sec: int = Field(
        default=300, description="Buffers up to this many seconds are at most MED risk"
    )
    no_live_train_penalty: int = Field(
        default=120, description="Score penalty when the train has no live data"
    )
    no_live_bus_penalty: int = Field(
        default=60, description="Score penalty when the bus has no live data"
    )
    high_risk_penalty: int = Field(default=300, description="Score penalty for HIGH risk")
    med_risk_penalty: int = Field(default=100, description="Score penalty for MED risk")
    wrap_ready_threshold_sec: int = Field(
        default=80000, description="Readiness times above this may match post-midnight buses"
    )
    wrap_bus_threshold_sec: int = Field(
        default=10000, description="Bus times below this count as next-day for late readiness"
    )

    # Runtime
    log_level: str = Field(default="INFO", description="Logging level")
    template_file: str | None = Field(
        default=None, description="Default route template TOML file for the CLI"
    )

    @field_validator("max_attempts", "trip_enrichment_workers", "max_train_candidates")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts that must be at least one."""
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("request_timeout_seconds", "departure_cache_ttl_seconds")
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        """Validate durations that must be positive."""
        if v <= 0:
            raise ValueError("duration must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    def scoring_policy(self) -> ScoringPolicy:
        """Build the risk and score policy from configuration."""
        return ScoringPolicy(
            med_risk_threshold_sec=self.med_risk_threshold_sec,
            no_live_train_penalty=self.no_live_train_penalty,
            no_live_bus_penalty=self.no_live_bus_penalty,
            high_risk_penalty=self.high_risk_penalty,
            med_risk_penalty=self.med_risk_penalty,
        )

    def engine_policy(self) -> EnginePolicy:
        """Build the matching policy from configuration."""
        return EnginePolicy(
            max_train_candidates=self.max_train_candidates,
            max_options_per_ride=self.max_options_per_ride,
            default_walk_minutes=self.default_walk_minutes,
            train_fetch_limit=self.train_fetch_limit,
            bus_fetch_limit=self.bus_fetch_limit,
            wrap_ready_threshold_sec=self.wrap_ready_threshold_sec,
            wrap_bus_threshold_sec=self.wrap_bus_threshold_sec,
        )
