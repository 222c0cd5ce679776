# backend/tests/test_recipients.py

import pytest

from message_push.notifications.config import DispatcherConfig
from message_push.notifications.recipients import (
    PreferenceGate,
    RecipientResolver,
    SenderNameResolver,
    TokenProvider,
)
from message_push.notifications.schemas import NoOpReason
from message_push.store.client import InMemoryNotificationStore
from message_push.store.schemas import Conversation, Preference, Profile, PushToken


def _conversation_store(**kwargs) -> InMemoryNotificationStore:
    return InMemoryNotificationStore(
        conversations=[Conversation(id="c1", participant_a="u1", participant_b="u2")],
        **kwargs,
    )


@pytest.mark.parametrize(
    "sender_id, expected_recipient",
    [("u1", "u2"), ("u2", "u1")],
)
def test_recipient_is_the_other_participant(sender_id, expected_recipient):
    resolver = RecipientResolver(_conversation_store())

    lookup = resolver.resolve("c1", sender_id)

    assert lookup.found
    assert lookup.recipient_id == expected_recipient


def test_recipient_for_non_participant_sender_is_first_slot():
    resolver = RecipientResolver(_conversation_store())

    assert resolver.resolve("c1", "stranger").recipient_id == "u1"


def test_recipient_missing_conversation():
    lookup = RecipientResolver(_conversation_store()).resolve("nope", "u1")

    assert not lookup.found
    assert lookup.error is None


def test_recipient_lookup_failure_is_reported_as_not_found():
    store = _conversation_store(failing=["get_conversation"])

    lookup = RecipientResolver(store).resolve("c1", "u1")

    assert not lookup.found
    assert "simulated" in lookup.error


@pytest.mark.parametrize(
    "profile, expected",
    [
        (Profile(id="u1", display_name="Alice", email="alice@example.com"), "Alice"),
        (Profile(id="u1", display_name="", email="alice.w@example.com"), "alice.w"),
        (Profile(id="u1", display_name=None, email=None), "Someone"),
        (Profile(id="u1", display_name=None, email="@example.com"), "Someone"),
        (None, "Someone"),
    ],
)
def test_sender_name_fallback_chain(profile, expected):
    store = InMemoryNotificationStore(profiles=[profile] if profile else [])
    resolver = SenderNameResolver(store, DispatcherConfig())

    assert resolver.resolve("u1") == expected


def test_sender_name_never_fails():
    store = InMemoryNotificationStore(failing=["get_profile"])

    assert SenderNameResolver(store, DispatcherConfig()).resolve("u1") == "Someone"


def test_preference_gate_blocks_only_explicit_disable():
    store = InMemoryNotificationStore(
        preferences=[
            Preference(user_id="off", notifications_enabled=False),
            Preference(user_id="on", notifications_enabled=True),
        ]
    )
    gate = PreferenceGate(store)

    blocked = gate.check("off")
    assert blocked.allowed is False
    assert blocked.reason == NoOpReason.NOTIFICATIONS_DISABLED

    assert gate.check("on").allowed is True
    # レコード無しは default-allow
    assert gate.check("unknown").allowed is True


def test_preference_gate_allows_on_lookup_failure():
    gate = PreferenceGate(InMemoryNotificationStore(failing=["get_preference"]))

    assert gate.check("u2").allowed is True


def test_token_provider_filters_malformed_and_inactive_tokens():
    store = InMemoryNotificationStore(
        push_tokens=[
            PushToken(user_id="u2", token="ExponentPushToken[a]", device_type="ios"),
            PushToken(user_id="u2", token="fcm:not-expo", device_type="android"),
            PushToken(user_id="u2", token="ExpoPushToken[b]", device_type="android"),
            PushToken(user_id="u2", token="ExpoPushToken[c]", is_active=False),
            PushToken(user_id="u9", token="ExpoPushToken[other-user]"),
        ]
    )

    selection = TokenProvider(store, DispatcherConfig()).load("u2")

    assert selection.skip_reason is None
    assert selection.tokens == ["ExponentPushToken[a]", "ExpoPushToken[b]"]
    assert selection.dropped == 1


def test_token_provider_no_active_tokens():
    selection = TokenProvider(InMemoryNotificationStore(), DispatcherConfig()).load("u2")

    assert selection.tokens == []
    assert selection.skip_reason == NoOpReason.NO_ACTIVE_TOKENS


def test_token_provider_lookup_failure_is_soft():
    store = InMemoryNotificationStore(failing=["list_active_push_tokens"])

    selection = TokenProvider(store, DispatcherConfig()).load("u2")

    assert selection.skip_reason == NoOpReason.NO_ACTIVE_TOKENS


def test_token_provider_no_valid_tokens():
    store = InMemoryNotificationStore(
        push_tokens=[PushToken(user_id="u2", token="apns-device-token")]
    )

    selection = TokenProvider(store, DispatcherConfig()).load("u2")

    assert selection.tokens == []
    assert selection.skip_reason == NoOpReason.NO_VALID_TOKENS
    assert selection.dropped == 1
