"""Custom exception hierarchy for pytflbus."""

from __future__ import annotations


class TflError(Exception):
    """Base exception for all pytflbus errors."""


class TflConfigError(TflError):
    """Invalid or missing configuration."""


class TflTransportError(TflError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TflTimeoutError(TflTransportError):
    """Request exceeded its time budget.

    Raised instead of letting an upstream call hang; the poller and the
    search session treat it as "no data this cycle".
    """


class TflNotFoundError(TflTransportError):
    """Upstream returned 404 (unknown stop point or vehicle)."""


class TflRateLimitError(TflTransportError):
    """Upstream returned 429.

    Anonymous TfL access is heavily throttled; configure ``app_key`` to
    raise the limit.
    """


class TflApiError(TflError):
    """Response parsed as JSON but did not have the expected shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
