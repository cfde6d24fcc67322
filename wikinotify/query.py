"""Query parameter builders for the Echo notifications API.

Every builder returns a flat ``dict[str, str]``; URL encoding is left to the
transport.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from wikinotify.models import Notification

Parameters = dict[str, str]


@dataclass(frozen=True)
class Limit:
    """Page size for notification queries: ``Limit.MAX`` or ``Limit.numeric(n)``."""

    value: str

    MAX: ClassVar[Limit]

    @classmethod
    def numeric(cls, number: int) -> Limit:
        return cls(str(number))


Limit.MAX = Limit("max")


class Filter(str, Enum):
    READ = "read"
    UNREAD = "!read"
    NONE = "read|!read"


class NotifierType(str, Enum):
    WEB = "web"
    PUSH = "push"
    EMAIL = "email"


def wiki_db_name(subdomain: str) -> str:
    """Map a site subdomain to its database name (``zh-yue`` -> ``zh_yuewiki``)."""
    name = subdomain.replace("-", "_")
    # already a database name, e.g. ``test-wiki``
    if name.endswith("wiki"):
        return name
    return f"{name}wiki"


def notifications_params(
    subdomains: Sequence[str] = (),
    limit: Limit = Limit.MAX,
    filter: Filter = Filter.NONE,
    notifier_type: NotifierType | None = None,
) -> Parameters:
    """Parameters for ``action=query&meta=notifications``."""
    params: Parameters = {
        "action": "query",
        "format": "json",
        "formatversion": "2",
        "notformat": "model",
        "meta": "notifications",
        "notlimit": limit.value,
        "notfilter": Filter(filter).value,
    }

    if notifier_type is not None:
        params["notnotifiertype"] = NotifierType(notifier_type).value

    if not subdomains:
        params["notwikis"] = "*"
    else:
        params["notwikis"] = "|".join(wiki_db_name(s) for s in subdomains)

    return params


def mark_as_read_params(notifications: Iterable[Notification]) -> Parameters:
    """Parameters for ``action=echomarkread``.

    ``wikis`` and ``list`` are built in the same order so they pair up. An
    empty input gives empty strings; callers must not send that request.
    """
    notifications = list(notifications)
    return {
        "action": "echomarkread",
        "format": "json",
        "wikis": "|".join(n.wiki for n in notifications),
        "list": "|".join(n.id for n in notifications),
    }


def token_params(kind: str) -> Parameters:
    """Parameters for ``action=query&meta=tokens``."""
    return {
        "action": "query",
        "format": "json",
        "meta": "tokens",
        "type": kind,
    }
