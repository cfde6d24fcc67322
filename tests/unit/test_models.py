"""Unit tests for notification decoding."""

from __future__ import annotations

import copy
import json

import pytest
from pydantic import ValidationError

from wikinotify.errors import ApiError, DecodeError, NoResultError
from wikinotify.models import (
    MarkReadResult,
    Notification,
    NotificationsResult,
    decode_model,
    decode_notifications,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SAMPLE_NOTIFICATION = {
    "wiki": "enwiki",
    "id": 123456,
    "type": "edit-user-talk",
    "category": "edit-user-talk",
    "section": "alert",
    "timestamp": {
        "utciso8601": "2026-02-15T10:00:00Z",
        "utcunix": 1771149600,
        "unix": "1771149600",
        "mw": "20260215100000",
    },
    "title": {
        "full": "User talk:Example",
        "namespace": "User_talk",
        "namespace-key": 3,
        "text": "Example",
    },
    "agent": {"id": 42, "name": "Alice"},
    "read": "20260215110000",
    "*": {
        "header": "<strong>Alice</strong> left a message on your talk page.",
        "body": "Hello there",
        "links": {
            "primary": {"url": "https://en.wikipedia.org/wiki/User_talk:Example", "label": "View message"},
            "secondary": [
                {"url": "https://en.wikipedia.org/wiki/User:Alice", "label": "Alice", "icon": "userAvatar"},
            ],
        },
    },
}


def _record(**overrides) -> dict:
    record = copy.deepcopy(SAMPLE_NOTIFICATION)
    record.update(overrides)
    return record


def _response(*records: dict) -> str:
    return json.dumps({
        "batchcomplete": True,
        "query": {"notifications": {"list": list(records), "continue": None}},
    })


def _decode_one(record: dict) -> Notification:
    result = decode_model(NotificationsResult, _response(record))
    (notification,) = result.require_notifications().items
    return notification


# ---------------------------------------------------------------------------
# Numeric-string fields
# ---------------------------------------------------------------------------


class TestNumericStrings:
    def test_id_int_and_string_decode_the_same(self):
        from_int = _decode_one(_record(id=123456))
        from_str = _decode_one(_record(id="123456"))
        assert from_int.id == "123456"
        assert from_str.id == "123456"
        assert from_int == from_str

    def test_agent_id_int_or_string(self):
        assert _decode_one(_record(agent={"id": 42, "name": "Alice"})).agent.id == "42"
        assert _decode_one(_record(agent={"id": "42", "name": "Alice"})).agent.id == "42"

    def test_timestamp_unix_int_or_string(self):
        ts = {"utciso8601": "2026-02-15T10:00:00Z", "utcunix": "1771149600"}
        assert _decode_one(_record(timestamp=ts)).timestamp.unix_string == "1771149600"
        assert _decode_one(SAMPLE_NOTIFICATION).timestamp.unix_string == "1771149600"

    def test_boolean_id_is_rejected(self):
        with pytest.raises(DecodeError):
            decode_notifications(_response(_record(id=True)))

    def test_null_id_is_rejected(self):
        with pytest.raises(DecodeError):
            decode_notifications(_response(_record(id=None)))


# ---------------------------------------------------------------------------
# Required vs best-effort fields
# ---------------------------------------------------------------------------


class TestRequiredFields:
    def test_missing_required_field_fails_whole_list(self):
        broken = _record()
        del broken["section"]
        with pytest.raises(DecodeError):
            decode_notifications(_response(_record(id=1), broken))

    def test_malformed_timestamp_fails(self):
        with pytest.raises(DecodeError):
            decode_notifications(_response(_record(timestamp={"utcunix": 1})))

    def test_wrong_type_for_wiki_fails(self):
        with pytest.raises(DecodeError):
            decode_notifications(_response(_record(wiki=12)))


class TestBestEffortFields:
    def test_full_record(self):
        n = _decode_one(SAMPLE_NOTIFICATION)
        assert n.wiki == "enwiki"
        assert n.title.namespace_key == 3
        assert n.title.full == "User talk:Example"
        assert n.agent.name == "Alice"
        assert n.read_string == "20260215110000"
        assert n.message.body == "Hello there"
        assert n.message.links.primary.label == "View message"
        assert isinstance(n.message.links.secondary, tuple)
        assert n.message.links.secondary[0].icon == "userAvatar"

    def test_malformed_title_becomes_none(self):
        n = _decode_one(_record(title="User talk:Example"))
        assert n.title is None
        assert n.id == "123456"

    def test_malformed_agent_becomes_none(self):
        n = _decode_one(_record(agent={"id": [1], "name": "Alice"}))
        assert n.agent is None

    def test_agent_without_id(self):
        n = _decode_one(_record(agent={"name": "Alice"}))
        assert n.agent.id is None
        assert n.agent.name == "Alice"

    def test_non_string_read_marker_becomes_none(self):
        assert _decode_one(_record(read=20260215110000)).read_string is None

    def test_malformed_message_becomes_none(self):
        assert _decode_one(_record(**{"*": ["not", "an", "object"]})).message is None

    def test_string_namespace_key_drops_title(self):
        title = dict(SAMPLE_NOTIFICATION["title"], **{"namespace-key": "3"})
        assert _decode_one(_record(title=title)).title is None

    def test_python_field_names_are_not_accepted_on_the_wire(self):
        record = _record(read_string="20260215110000", message={"header": "hi"})
        for key in ("read", "*"):
            del record[key]
        n = _decode_one(record)
        assert n.read_string is None
        assert n.message is None

    def test_absent_optionals(self):
        record = _record()
        for key in ("title", "agent", "read", "*"):
            del record[key]
        n = _decode_one(record)
        assert (n.title, n.agent, n.read_string, n.message) == (None, None, None, None)


# ---------------------------------------------------------------------------
# Identity and deduplication
# ---------------------------------------------------------------------------


class TestIdentity:
    def test_key(self):
        assert _decode_one(SAMPLE_NOTIFICATION).key == "enwiki-123456"

    def test_key_is_injective_over_ids(self):
        notifications = decode_notifications(_response(*[_record(id=i) for i in range(100)]))
        assert len({n.key for n in notifications}) == 100

    def test_identical_records_deduplicate(self):
        notifications = decode_notifications(_response(SAMPLE_NOTIFICATION, SAMPLE_NOTIFICATION))
        assert len(notifications) == 1

    def test_int_and_string_id_records_deduplicate(self):
        notifications = decode_notifications(_response(_record(id=7), _record(id="7")))
        assert len(notifications) == 1

    def test_same_key_different_values_are_kept(self):
        notifications = decode_notifications(
            _response(_record(read="20260215110000"), _record(read=None))
        )
        assert len(notifications) == 2
        assert {n.key for n in notifications} == {"enwiki-123456"}

    def test_two_decodings_compare_equal(self):
        first = _decode_one(SAMPLE_NOTIFICATION)
        second = _decode_one(SAMPLE_NOTIFICATION)
        assert first == second
        assert hash(first) == hash(second)

    def test_notifications_are_immutable(self):
        n = _decode_one(SAMPLE_NOTIFICATION)
        with pytest.raises(ValidationError):
            n.id = "1"

    def test_for_marking(self):
        n = Notification.for_marking("dewiki", 5)
        assert n.id == "5"
        assert n.key == "dewiki-5"
        assert n.timestamp.iso_string == ""
        assert n.title is None


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class TestEnvelopes:
    def test_error_envelope_raises_api_error(self):
        raw = json.dumps({"error": {"code": "badtoken", "info": "Invalid CSRF token."}})
        with pytest.raises(ApiError) as exc_info:
            decode_notifications(raw)
        assert str(exc_info.value) == "Invalid CSRF token."
        assert exc_info.value.code == "badtoken"

    def test_missing_query_raises_no_result(self):
        with pytest.raises(NoResultError):
            decode_notifications(json.dumps({"batchcomplete": True}))

    def test_invalid_json(self):
        with pytest.raises(DecodeError):
            decode_notifications(b"<html>oops</html>")

    def test_mark_read_success(self):
        result = MarkReadResult.model_validate({"query": {"echomarkread": {"result": "success"}}})
        assert result.succeeded is True

    def test_mark_read_other_result_is_not_success(self):
        result = MarkReadResult.model_validate({"query": {"echomarkread": {"result": "failure"}}})
        assert result.succeeded is False
        assert result.error is None

    def test_mark_read_missing_result_is_not_success(self):
        assert MarkReadResult.model_validate({"query": {"echomarkread": {}}}).succeeded is False
        assert MarkReadResult.model_validate({"query": {}}).succeeded is False
        assert MarkReadResult.model_validate({}).succeeded is False
