"""wikinotify configuration -- layered: explicit arguments > env vars > defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger("wikinotify.config")

DEFAULT_BATCH_SIZE = 50


def _env(key: str, *fallback_keys: str, default: str = "") -> str:
    """Look up a config value: WIKINOTIFY_* env var > fallback env keys > default."""
    for name in (key, *fallback_keys):
        val = os.environ.get(name)
        if val:
            return val
    return default


def _flag(key: str) -> bool:
    return _env(key).lower() in ("true", "1", "yes")


@dataclass
class NotificationsConfig:
    """Configuration for a notifications client."""

    # Endpoints
    cross_wiki_api_url: str = field(
        default_factory=lambda: _env(
            "WIKINOTIFY_CROSS_WIKI_API_URL", default="https://www.mediawiki.org/w/api.php"
        )
    )
    wikidata_api_url: str = field(
        default_factory=lambda: _env(
            "WIKINOTIFY_WIKIDATA_API_URL", default="https://www.wikidata.org/w/api.php"
        )
    )
    commons_api_url: str = field(
        default_factory=lambda: _env(
            "WIKINOTIFY_COMMONS_API_URL", default="https://commons.wikimedia.org/w/api.php"
        )
    )
    language_api_url_template: str = field(
        default_factory=lambda: _env(
            "WIKINOTIFY_LANGUAGE_API_URL_TEMPLATE",
            default="https://{language}.wikipedia.org/w/api.php",
        )
    )

    # Write pipeline
    batch_size: int = field(
        default_factory=lambda: int(_env("WIKINOTIFY_BATCH_SIZE", default=str(DEFAULT_BATCH_SIZE)))
    )
    # Raise instead of degrading when a response breaks the decoding contract.
    strict: bool = field(default_factory=lambda: _flag("WIKINOTIFY_STRICT"))

    # Transport
    timeout: float = field(
        default_factory=lambda: float(_env("WIKINOTIFY_TIMEOUT", default="30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: _env("WIKINOTIFY_USER_AGENT", default="wikinotify/0.1.0")
    )

    # Logging
    log_level: str = field(
        default_factory=lambda: _env("WIKINOTIFY_LOG_LEVEL", "LOG_LEVEL", default="INFO")
    )
    log_format: str = field(
        default_factory=lambda: _env("WIKINOTIFY_LOG_FORMAT", default="text")
    )

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            logger.warning("Invalid batch_size %d, using %d", self.batch_size, DEFAULT_BATCH_SIZE)
            self.batch_size = DEFAULT_BATCH_SIZE
