"""Pydantic models for notifications API responses.

The Echo API has emitted both JSON integers and numeric strings for the same
logical field across server versions, so ``id``, ``agent.id`` and
``timestamp.utcunix`` are decoded with an integer-then-string strategy and
always stored as ``str``.

Optional nested objects (``title``, ``agent``, ``read``, ``*``) are decoded
best-effort: a malformed value becomes ``None`` instead of failing the whole
notification. This is lossy on purpose and can hide a schema change on the
server, so every dropped value is logged at DEBUG.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from wikinotify.errors import ApiError, DecodeError, NoResultError

logger = logging.getLogger("wikinotify.models")

M = TypeVar("M", bound=BaseModel)


def _numeric_string(value: Any) -> str:
    """Decode a value sent either as a JSON integer or as a string."""
    # bool is an int subclass but never a valid id
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value
    raise ValueError(f"expected an integer or a string, got {type(value).__name__}")


NumericString = Annotated[str, BeforeValidator(_numeric_string)]


class _WireModel(BaseModel):
    """Immutable, hashable model validated against the wire field names."""

    model_config = ConfigDict(frozen=True)


# ── Notification ──────────────────────────────────────────────────────


class Timestamp(_WireModel):
    iso_string: str = Field(alias="utciso8601")
    unix_string: NumericString = Field(alias="utcunix")


class Title(_WireModel):
    full: str | None = None
    namespace: str | None = None
    namespace_key: StrictInt | None = Field(default=None, alias="namespace-key")
    text: str | None = None


class Agent(_WireModel):
    id: NumericString | None = None
    name: str | None = None


class NotificationLink(_WireModel):
    url: str | None = None
    label: str | None = None
    tooltip: str | None = None
    description: str | None = None
    icon: str | None = None


class NotificationLinks(_WireModel):
    primary: NotificationLink | None = None
    secondary: tuple[NotificationLink, ...] | None = None


class Message(_WireModel):
    header: str | None = None
    body: str | None = None
    links: NotificationLinks | None = None


class Notification(_WireModel):
    """A single notification, unique per ``(wiki, id)``."""

    wiki: str
    id: NumericString
    type: str
    category: str
    section: str
    timestamp: Timestamp
    title: Title | None = None
    agent: Agent | None = None
    read_string: str | None = Field(default=None, alias="read")
    message: Message | None = Field(default=None, alias="*")

    @field_validator("title", "agent", "read_string", "message", mode="wrap")
    @classmethod
    def _best_effort(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError as exc:
            logger.debug(
                "Ignoring malformed %r on notification (%d error(s)): %s",
                info.field_name,
                exc.error_count(),
                exc.errors()[0]["msg"],
            )
            return None

    @property
    def key(self) -> str:
        return f"{self.wiki}-{self.id}"

    @classmethod
    def for_marking(cls, wiki: str, id: str | int) -> Notification:
        """Build a notification carrying only what mark-as-read needs."""
        return cls.model_validate({
            "wiki": wiki,
            "id": id,
            "type": "",
            "category": "",
            "section": "",
            "timestamp": {"utciso8601": "", "utcunix": ""},
        })


class Notifications(_WireModel):
    items: tuple[Notification, ...] = Field(alias="list")

    def unique(self) -> set[Notification]:
        """Deduplicate by full value equality. Order is not preserved."""
        return set(self.items)


# ── Envelopes ─────────────────────────────────────────────────────────


class ResultError(_WireModel):
    code: str | None = None
    info: str | None = None

    def to_exception(self) -> ApiError:
        return ApiError(code=self.code, info=self.info)


class ApiEnvelope(_WireModel):
    """Common ``{"error": ..., "query": ...}`` response wrapper."""

    error: ResultError | None = None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error.to_exception()


class NotificationsQuery(_WireModel):
    notifications: Notifications | None = None


class NotificationsResult(ApiEnvelope):
    query: NotificationsQuery | None = None

    @property
    def notifications(self) -> Notifications | None:
        return self.query.notifications if self.query else None

    def require_notifications(self) -> Notifications:
        """Return the notification list or raise the API error / ``NoResultError``."""
        self.raise_for_error()
        if self.notifications is None:
            raise NoResultError("Notifications response contained no notification list")
        return self.notifications


class MarkReadStatus(str, Enum):
    SUCCESS = "success"


class MarkedAsRead(_WireModel):
    # Kept as a plain string so unexpected values decode as "not success".
    result: str | None = None


class MarkReadQuery(_WireModel):
    mark_as_read: MarkedAsRead | None = Field(default=None, alias="echomarkread")


class MarkReadResult(ApiEnvelope):
    query: MarkReadQuery | None = None

    @property
    def succeeded(self) -> bool:
        if self.query is None or self.query.mark_as_read is None:
            return False
        return self.query.mark_as_read.result == MarkReadStatus.SUCCESS.value


class TokensQuery(_WireModel):
    tokens: dict[str, str] = Field(default_factory=dict)


class TokensResult(ApiEnvelope):
    query: TokensQuery | None = None


# ── Decoding helpers ──────────────────────────────────────────────────


def decode_model(model: type[M], raw: bytes | str) -> M:
    """Decode a raw JSON body into ``model``, raising ``DecodeError`` on mismatch."""
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(
            f"Could not decode {model.__name__} ({exc.error_count()} error(s)): {exc}"
        ) from exc


def decode_notifications(raw: bytes | str) -> set[Notification]:
    """Decode a notifications query response into a deduplicated set."""
    return decode_model(NotificationsResult, raw).require_notifications().unique()
