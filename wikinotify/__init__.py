"""wikinotify -- client for wiki (Echo) notifications."""

__version__ = "0.1.0"

from wikinotify.client import NotificationsClient
from wikinotify.config import NotificationsConfig
from wikinotify.errors import (
    ApiError,
    DecodeError,
    InvalidParametersError,
    MultipleMarkReadErrors,
    NoResultError,
    NotificationsError,
    TokenError,
    TransportError,
    UnknownMarkReadError,
)
from wikinotify.log import setup_logging
from wikinotify.models import Notification, Notifications, decode_notifications

__all__ = [
    "__version__",
    "NotificationsClient",
    "NotificationsConfig",
    "Notification",
    "Notifications",
    "decode_notifications",
    "setup_logging",
    "ApiError",
    "DecodeError",
    "InvalidParametersError",
    "MultipleMarkReadErrors",
    "NoResultError",
    "NotificationsError",
    "TokenError",
    "TransportError",
    "UnknownMarkReadError",
]
