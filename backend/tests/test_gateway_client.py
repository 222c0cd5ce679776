# backend/tests/test_gateway_client.py

import httpx
import pytest

from message_push.gateway.client import (
    ExpoPushClient,
    GatewayConnectionError,
    GatewayDeliveryFailed,
    GatewayResponseError,
    PushGatewayError,
)
from message_push.gateway.config import PushGatewaySettings, get_push_gateway_settings


def _make_client(access_token=None) -> ExpoPushClient:
    return ExpoPushClient(
        PushGatewaySettings(
            endpoint="http://push.test/send",
            access_token=access_token,
            timeout_seconds=5,
        )
    )


def test_gateway_errors_share_base_class():
    assert issubclass(GatewayDeliveryFailed, PushGatewayError)
    assert issubclass(GatewayConnectionError, PushGatewayError)
    assert issubclass(GatewayResponseError, PushGatewayError)


def test_send_posts_batch_and_returns_json(monkeypatch):
    captured = {}

    def fake_post(self, url, json=None, headers=None, **kwargs):  # noqa: A002
        captured["url"] = url
        captured["json"] = json
        captured["headers"] = headers
        return httpx.Response(
            status_code=200,
            content=b'{"data": [{"status": "ok", "id": "ticket-1"}]}',
        )

    monkeypatch.setattr(httpx.Client, "post", fake_post)

    messages = [{"to": "ExponentPushToken[a]", "title": "t", "body": "b"}]
    result = _make_client().send(messages)

    assert result == {"data": [{"status": "ok", "id": "ticket-1"}]}
    assert captured["url"] == "http://push.test/send"
    assert captured["json"] == messages
    assert captured["headers"]["Accept"] == "application/json"
    assert captured["headers"]["Accept-Encoding"] == "gzip, deflate"
    assert captured["headers"]["Content-Type"] == "application/json"
    assert "Authorization" not in captured["headers"]


def test_send_adds_bearer_token_when_configured(monkeypatch):
    captured = {}

    def fake_post(self, url, json=None, headers=None, **kwargs):  # noqa: A002
        captured["headers"] = headers
        return httpx.Response(status_code=200, content=b"{}")

    monkeypatch.setattr(httpx.Client, "post", fake_post)

    _make_client(access_token="secret").send([])

    assert captured["headers"]["Authorization"] == "Bearer secret"


def test_send_raises_delivery_failed_on_non_2xx(monkeypatch):
    def fake_post(self, url, json=None, headers=None, **kwargs):  # noqa: A002
        return httpx.Response(status_code=400, content=b"bad batch")

    monkeypatch.setattr(httpx.Client, "post", fake_post)

    with pytest.raises(GatewayDeliveryFailed) as exc_info:
        _make_client().send([{"to": "ExponentPushToken[a]"}])

    assert exc_info.value.status_code == 400
    assert exc_info.value.body == "bad batch"


def test_send_raises_connection_error_on_timeout(monkeypatch):
    def fake_post(self, url, json=None, headers=None, **kwargs):  # noqa: A002
        raise httpx.ConnectTimeout("timed out", request=None)

    monkeypatch.setattr(httpx.Client, "post", fake_post)

    with pytest.raises(GatewayConnectionError):
        _make_client().send([])


def test_send_raises_response_error_on_non_json_success_body(monkeypatch):
    def fake_post(self, url, json=None, headers=None, **kwargs):  # noqa: A002
        return httpx.Response(status_code=200, content=b"<html>ok</html>")

    monkeypatch.setattr(httpx.Client, "post", fake_post)

    with pytest.raises(GatewayResponseError):
        _make_client().send([])


def test_push_gateway_settings_from_env(monkeypatch):
    get_push_gateway_settings.cache_clear()
    monkeypatch.setenv("EXPO_PUSH_ENDPOINT", "http://push.test/custom")
    monkeypatch.setenv("PUSH_GATEWAY_TIMEOUT_SECONDS", "not-a-number")
    monkeypatch.delenv("EXPO_ACCESS_TOKEN", raising=False)

    try:
        settings = get_push_gateway_settings()
    finally:
        get_push_gateway_settings.cache_clear()

    assert settings.endpoint == "http://push.test/custom"
    assert settings.access_token is None
    # パース不能な値はデフォルトにフォールバック
    assert settings.timeout_seconds == 10
