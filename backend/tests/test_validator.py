# backend/tests/test_validator.py

import pytest

from message_push.notifications.validator import (
    BadRequestError,
    MethodNotAllowedError,
    validate_event,
)


def test_validate_event_accepts_well_formed_body():
    event = validate_event("POST", b'{"conversationId": "c1", "senderId": "u1", "content": ""}')

    assert event.conversation_id == "c1"
    assert event.sender_id == "u1"
    assert event.content == ""


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_validate_event_rejects_other_methods(method):
    with pytest.raises(MethodNotAllowedError):
        validate_event(method, b'{"conversationId": "c1", "senderId": "u1", "content": "x"}')


@pytest.mark.parametrize(
    "raw_body",
    [
        b"",
        b"not json",
        b'["c1", "u1", "hi"]',
        b'{"senderId": "u1", "content": "hi"}',
        b'{"conversationId": "c1", "senderId": "u1"}',
        b'{"conversationId": "c1", "senderId": 42, "content": "hi"}',
        b'{"conversationId": "c1", "senderId": "u1", "content": null}',
    ],
)
def test_validate_event_rejects_malformed_bodies(raw_body):
    with pytest.raises(BadRequestError):
        validate_event("POST", raw_body)


def test_validate_event_reports_field_errors():
    with pytest.raises(BadRequestError) as exc_info:
        validate_event("POST", b'{"conversationId": "c1", "senderId": "u1"}')

    fields = [err["field"] for err in exc_info.value.errors]
    assert "content" in fields


def test_validate_event_accepts_empty_ids():
    event = validate_event("POST", b'{"conversationId": "", "senderId": "", "content": "hi"}')

    assert event.conversation_id == ""
    assert event.sender_id == ""
