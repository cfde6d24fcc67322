"""Error types raised by the notifications client."""

from __future__ import annotations


class NotificationsError(Exception):
    """Base class for every error raised by wikinotify."""


class TransportError(NotificationsError):
    """The HTTP call itself failed (connection, timeout, HTTP status)."""


class DecodeError(NotificationsError):
    """The response body was not JSON or did not match the expected shape."""


class InvalidParametersError(NotificationsError):
    """A request URL could not be built from the given inputs."""


class TokenError(NotificationsError):
    """A write token could not be acquired."""


class ApiError(NotificationsError):
    """The API answered with an ``error`` envelope."""

    def __init__(self, code: str | None = None, info: str | None = None):
        self.code = code
        self.info = info
        super().__init__(info or code or "Unknown API error")

    def __str__(self) -> str:
        return self.info or self.code or "Unknown API error"


class MarkReadError(NotificationsError):
    """Base class for mark-as-read specific failures."""


class NoResultError(MarkReadError):
    """The mark-as-read response carried neither a result nor an error."""

    def __init__(self, message: str = "Mark as read response contained no result"):
        super().__init__(message)


class UnknownMarkReadError(MarkReadError):
    """The write completed but did not report success."""

    def __init__(self, message: str = "Mark as read did not report success"):
        super().__init__(message)


class MultipleMarkReadErrors(MarkReadError):
    """One or more mark-as-read batches failed.

    ``errors`` keeps every batch error in batch order.
    """

    def __init__(self, errors: list[Exception]):
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} mark as read request(s) failed: "
            + "; ".join(str(e) for e in self.errors)
        )

    def __len__(self) -> int:
        return len(self.errors)
