"""Exceptions raised by the transfer advisor."""


class TransferAdvisorError(Exception):
    """Base class for transfer advisor errors."""


class RouteTemplateError(TransferAdvisorError):
    """The route template cannot be used to compute recommendations."""


class UpstreamError(TransferAdvisorError):
    """An upstream transit API call failed (timeout, bad status or malformed body)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
