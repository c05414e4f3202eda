"""Upstream failure summary."""

from pydantic import BaseModel, ConfigDict

TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class ErrorDetails(BaseModel):
    """Why a stop or trip could not be fetched from the transit API."""

    model_config = ConfigDict(frozen=True)

    resource: str
    reason: str
    status_code: int | None = None

    @property
    def is_transient(self) -> bool:
        """Whether the next poll is likely to succeed (timeouts and overload statuses)."""
        return self.status_code is None or self.status_code in TRANSIENT_STATUS_CODES

    def describe(self) -> str:
        status = f"HTTP {self.status_code}" if self.status_code is not None else "no response"
        kind = "transient" if self.is_transient else "permanent"
        return f"{self.resource}: {self.reason} ({status}, {kind})"
