from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class FetchError(AppError):
    """The ticket source could not deliver a snapshot this cycle."""


class RateLimitedError(FetchError):
    """The backend asked us to slow down (HTTP 429)."""

    def __init__(self, detail: str = "", *, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(detail)


class TransportError(FetchError):
    def __init__(self, detail: str = "", *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(detail)


class MalformedSnapshotError(AppError):
    """A fetched ticket record is missing required fields or has invalid values."""

    def __init__(self, ticket_id: str | None, reason: str) -> None:
        self.ticket_id = ticket_id
        self.reason = reason
        super().__init__(f"ticket {ticket_id or '?'}: {reason}")
