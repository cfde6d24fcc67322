"""HTTP transport: issue a request and decode the JSON body into a model."""
from __future__ import annotations

import logging
from typing import Protocol, TypeVar

import httpx
from pydantic import BaseModel

from wikinotify.config import NotificationsConfig
from wikinotify.errors import TransportError
from wikinotify.models import decode_model

logger = logging.getLogger("wikinotify.transport")

M = TypeVar("M", bound=BaseModel)

CENTRAL_AUTH_COOKIES = ("centralauth_User", "centralauth_Session")


class Transport(Protocol):
    async def request(
        self,
        url: str,
        model: type[M],
        *,
        method: str = "GET",
        body: dict[str, str] | None = None,
    ) -> M: ...

    def has_valid_central_auth_cookies(self, domain: str) -> bool: ...


class HttpxTransport:
    """Thin async HTTP wrapper around httpx.

    Connection errors, timeouts and non-2xx statuses raise ``TransportError``;
    bodies that do not match ``model`` raise ``DecodeError``. Nothing is
    retried.
    """

    def __init__(
        self,
        config: NotificationsConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or NotificationsConfig()
        self._client = client

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=True,
        )

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = self._build_client()
        return self._client

    async def request(
        self,
        url: str,
        model: type[M],
        *,
        method: str = "GET",
        body: dict[str, str] | None = None,
    ) -> M:
        client = await self._ensure_client()
        try:
            # form-encoded, the API does not accept JSON bodies
            resp = await client.request(method, url, data=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("HTTP %d on %s %s", exc.response.status_code, method, _redact(url))
            raise TransportError(
                f"HTTP {exc.response.status_code} from {method} {_redact(url)}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Transport error on %s %s: %s", method, _redact(url), exc)
            raise TransportError(f"{method} {_redact(url)} failed: {exc}") from exc

        logger.debug("%s %s -> %d (%d bytes)", method, _redact(url), resp.status_code, len(resp.content))
        return decode_model(model, resp.content)

    @property
    def cookies(self) -> httpx.Cookies:
        if self._client is None:
            self._client = self._build_client()
        return self._client.cookies

    def has_valid_central_auth_cookies(self, domain: str) -> bool:
        """True when unexpired central-auth user and session cookies exist for ``domain``."""
        domain = domain.lstrip(".")
        found: set[str] = set()
        for cookie in self.cookies.jar:
            if cookie.name not in CENTRAL_AUTH_COOKIES or cookie.is_expired():
                continue
            cookie_domain = cookie.domain.lstrip(".")
            if domain == cookie_domain or domain.endswith(f".{cookie_domain}"):
                found.add(cookie.name)
        return found == set(CENTRAL_AUTH_COOKIES)

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def _redact(url: str) -> str:
    """Drop the query string so logs stay short."""
    return url.split("?", 1)[0]
