"""Site routing: which API endpoint serves a given site identifier."""

from __future__ import annotations

import re
from enum import Enum

import httpx

from wikinotify.config import NotificationsConfig
from wikinotify.errors import InvalidParametersError
from wikinotify.query import Parameters

WIKIDATA = "wikidata"
COMMONS = "commons"

# A language code has to work as a single DNS label in the endpoint template.
_HOST_LABEL = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")


class SiteKind(str, Enum):
    LANGUAGE = "language"
    WIKIDATA = "wikidata"
    COMMONS = "commons"
    CROSS_WIKI = "cross_wiki"


def site_kind(identifier: str | None) -> SiteKind:
    if identifier is None:
        return SiteKind.CROSS_WIKI
    if identifier == WIKIDATA:
        return SiteKind.WIKIDATA
    if identifier == COMMONS:
        return SiteKind.COMMONS
    return SiteKind.LANGUAGE


def api_base_url(identifier: str | None, config: NotificationsConfig) -> str:
    """Return the ``api.php`` URL for a site, without query parameters."""
    kind = site_kind(identifier)
    if kind is SiteKind.CROSS_WIKI:
        return config.cross_wiki_api_url
    if kind is SiteKind.WIKIDATA:
        return config.wikidata_api_url
    if kind is SiteKind.COMMONS:
        return config.commons_api_url

    if not _HOST_LABEL.match(identifier or ""):
        raise InvalidParametersError(f"Cannot build an API URL for site {identifier!r}")
    return config.language_api_url_template.format(language=identifier.lower())


def resolve_endpoint(
    identifier: str | None,
    params: Parameters | None,
    config: NotificationsConfig,
) -> str:
    """Build the full request URL for ``identifier`` with ``params`` as query string.

    Raises:
        InvalidParametersError: If no well-formed URL can be built.
    """
    base = api_base_url(identifier, config)
    try:
        url = httpx.URL(base)
        if params:
            url = url.copy_merge_params(params)
    except httpx.InvalidURL as exc:
        raise InvalidParametersError(f"Invalid API URL {base!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidParametersError(f"Invalid API URL {base!r}")
    return str(url)
