from wikinotify.client.transport import HttpxTransport, Transport
from wikinotify.client.tokens import MediaWikiTokenProvider, TokenKind, TokenProvider
from wikinotify.client.notifications import NotificationsClient

__all__ = [
    "HttpxTransport", "Transport", "MediaWikiTokenProvider", "TokenKind",
    "TokenProvider", "NotificationsClient",
]
