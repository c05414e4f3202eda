"""Request and response tracing for upstream calls, enabled by TRANSFER_LOG_REQUESTS=true."""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


def should_log_requests() -> bool:
    return os.getenv("TRANSFER_LOG_REQUESTS", "").lower() == "true"


def build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    """Append query parameters in sorted order so identical requests log identically."""
    if not params:
        return url
    query = "&".join(f"{key}={value}" for key, value in sorted(params.items()))
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def _attempt_suffix(attempt: int) -> str:
    return f" (attempt {attempt})" if attempt > 1 else ""


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    attempt: int = 1,
) -> None:
    """Trace an outgoing request.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters, if any.
        attempt: 1-based attempt number within a retry sequence.
    """
    if not should_log_requests():
        return
    full_url = build_url_with_params(url, params)
    logger.info(f"API Request: {method} {full_url}{_attempt_suffix(attempt)}")


def log_api_response(url: str, status: int, elapsed_sec: float, attempt: int = 1) -> None:
    """Trace the status and latency of a completed request."""
    if not should_log_requests():
        return
    elapsed_ms = round(elapsed_sec * 1000)
    logger.info(f"API Response: {status} {url} in {elapsed_ms} ms{_attempt_suffix(attempt)}")
