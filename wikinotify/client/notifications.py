"""Notifications client: read notifications and mark them as read."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar

from pydantic import BaseModel

from wikinotify.batching import chunked, join_outcomes
from wikinotify.client.tokens import MediaWikiTokenProvider, TokenKind, TokenProvider
from wikinotify.client.transport import HttpxTransport, Transport
from wikinotify.config import NotificationsConfig
from wikinotify.endpoints import resolve_endpoint
from wikinotify.errors import (
    MultipleMarkReadErrors,
    NoResultError,
    UnknownMarkReadError,
)
from wikinotify.models import (
    MarkReadResult,
    Notification,
    Notifications,
    NotificationsResult,
)
from wikinotify.query import (
    Filter,
    Limit,
    NotifierType,
    Parameters,
    mark_as_read_params,
    notifications_params,
)

logger = logging.getLogger("wikinotify.client")

M = TypeVar("M", bound=BaseModel)


class NotificationsClient:
    """Client for the Echo notifications API.

    Usage::

        async with NotificationsClient() as client:
            unread = await client.get_unread_push_notifications("en")
            await client.mark_as_read(unread.unique())
    """

    def __init__(
        self,
        transport: Transport | None = None,
        tokens: TokenProvider | None = None,
        config: NotificationsConfig | None = None,
    ):
        self.config = config or NotificationsConfig()
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpxTransport(self.config)
        self.tokens: TokenProvider = tokens or MediaWikiTokenProvider(self.transport)

    async def _request(
        self,
        site: str | None,
        params: Parameters,
        model: type[M],
        method: str = "GET",
    ) -> M:
        """Send a request to the endpoint serving ``site``.

        Reads go out unauthenticated. Anything else first acquires a csrf
        token for the target URL and sends it as a form body parameter.
        """
        url = resolve_endpoint(site, params, self.config)
        if method == "GET":
            return await self.transport.request(url, model)

        token = await self.tokens.request_token(url, TokenKind.CSRF)
        return await self.transport.request(url, model, method=method, body={"token": token})

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------

    async def get_unread_push_notifications(self, language_code: str) -> Notifications:
        """Unread push notifications from every wiki, via ``language_code``'s API."""
        params = notifications_params(
            limit=Limit.MAX, filter=Filter.UNREAD, notifier_type=NotifierType.PUSH
        )
        result = await self._request(language_code, params, NotificationsResult)
        return result.require_notifications()

    async def get_all_notifications(self, language_code: str) -> Notifications:
        """Read and unread web notifications for the ``language_code`` wiki only."""
        params = notifications_params(
            [language_code], limit=Limit.MAX, filter=Filter.NONE, notifier_type=NotifierType.WEB
        )
        result = await self._request(language_code, params, NotificationsResult)
        return result.require_notifications()

    def is_authenticated_for_cookie_domain(self, cookie_domain: str) -> bool:
        return self.transport.has_valid_central_auth_cookies(cookie_domain)

    # -------------------------------------------------------------------
    # Mark as read
    # -------------------------------------------------------------------

    async def mark_as_read(self, notifications: Iterable[Notification]) -> None:
        """Mark ``notifications`` as read, in concurrent batches.

        Every batch runs to completion even if others fail. Failures are not
        retried.

        Raises:
            MultipleMarkReadErrors: If any batch failed; ``errors`` holds one
                entry per failed batch.
        """
        unique = list(dict.fromkeys(notifications))
        if not unique:
            return

        batches = chunked(unique, self.config.batch_size)
        outcomes = await join_outcomes(self._mark_batch_as_read(batch) for batch in batches)

        errors = [outcome for outcome in outcomes if outcome is not None]
        if errors:
            logger.error("%d of %d mark as read requests failed", len(errors), len(batches))
            raise MultipleMarkReadErrors(errors)

        logger.info("Marked %d notification(s) as read in %d request(s)", len(unique), len(batches))

    async def _mark_batch_as_read(self, batch: list[Notification]) -> Exception | None:
        """Run one batch and return its error, or ``None`` on success."""
        try:
            result = await self._request(
                None, mark_as_read_params(batch), MarkReadResult, method="POST"
            )
        except Exception as exc:
            # token provider and transport may be caller-supplied
            logger.warning("Mark as read batch of %d failed: %r", len(batch), exc)
            return exc

        if result.error is not None:
            return result.error.to_exception()

        if result.query is None:
            logger.error(
                "Mark as read response had no query result; MarkReadResult no longer matches the API"
            )
            if self.config.strict:
                raise AssertionError("Expected a query result in the mark as read response")
            return NoResultError()

        if not result.succeeded:
            return UnknownMarkReadError()

        logger.debug("Marked batch of %d notification(s) as read", len(batch))
        return None

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    async def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.close()

    async def __aenter__(self) -> NotificationsClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

