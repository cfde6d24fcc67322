"""Write-token acquisition for state-changing API calls."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

import httpx

from wikinotify.client.transport import Transport
from wikinotify.errors import ApiError, NotificationsError, TokenError
from wikinotify.models import TokensResult
from wikinotify.query import token_params

logger = logging.getLogger("wikinotify.tokens")

# what api.php hands out to logged-out sessions
ANONYMOUS_TOKEN = "+\\"


class TokenKind(str, Enum):
    CSRF = "csrf"
    WATCH = "watch"
    PATROL = "patrol"
    ROLLBACK = "rollback"
    USERRIGHTS = "userrights"


class TokenProvider(Protocol):
    async def request_token(self, url: str, kind: TokenKind = TokenKind.CSRF) -> str: ...


class MediaWikiTokenProvider:
    """Fetches a fresh token from the ``api.php`` serving ``url``.

    Tokens are not cached: each call issues its own ``meta=tokens`` query.
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    async def request_token(self, url: str, kind: TokenKind = TokenKind.CSRF) -> str:
        kind = TokenKind(kind)
        # same api.php, token query replaces the original parameters
        endpoint = httpx.URL(url).copy_with(params=token_params(kind.value))
        token_url = str(endpoint)

        try:
            result = await self.transport.request(token_url, TokensResult)
            result.raise_for_error()
        except ApiError as exc:
            raise TokenError(f"Token request for {endpoint.host} was rejected: {exc}") from exc
        except NotificationsError as exc:
            raise TokenError(f"Could not fetch {kind.value} token from {endpoint.host}: {exc}") from exc

        tokens = result.query.tokens if result.query else {}
        token = tokens.get(f"{kind.value}token")
        if not token:
            raise TokenError(f"No {kind.value} token in response from {endpoint.host}")
        if token == ANONYMOUS_TOKEN:
            raise TokenError(f"Not logged in on {endpoint.host}")

        logger.debug("Acquired %s token for %s", kind.value, endpoint.host)
        return token
