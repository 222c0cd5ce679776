from typing import Any, Dict, List, Protocol

import httpx

from .config import PushGatewaySettings, get_push_gateway_settings


class PushGatewayError(Exception):
    """プッシュゲートウェイ全般の基底例外。"""


class GatewayDeliveryFailed(PushGatewayError):
    """ゲートウェイがバッチを非 2xx で拒否した場合の例外。"""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Push gateway error: status_code={status_code}")
        self.status_code = status_code
        self.body = body


class GatewayConnectionError(PushGatewayError):
    """接続エラー・タイムアウト時の例外。"""


class GatewayResponseError(PushGatewayError):
    """2xx だがボディが JSON として解釈できなかった場合の例外。"""


class PushGateway(Protocol):
    """
    プッシュゲートウェイのインターフェース。

    send() を備えた実装であれば差し替え可能（リトライ付き実装など）。
    """

    def send(self, messages: List[Dict[str, Any]]) -> Any:  # pragma: no cover - Protocol
        ...


class ExpoPushClient:
    """
    Expo Push API への HTTP クライアント。

    メッセージ配列を 1 回の POST でまとめて送信する。リトライは行わない。
    """

    def __init__(self, settings: PushGatewaySettings | None = None) -> None:
        self._settings = settings or get_push_gateway_settings()

    @property
    def endpoint(self) -> str:
        return self._settings.endpoint

    @property
    def timeout(self) -> int:
        return self._settings.timeout_seconds

    def _build_headers(self) -> Dict[str, str]:
        """
        Expo Push API 呼び出しに使用する HTTP ヘッダを構築する。
        """
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self._settings.access_token:
            headers["Authorization"] = f"Bearer {self._settings.access_token}"
        return headers

    def send(self, messages: List[Dict[str, Any]]) -> Any:
        """
        メッセージ配列を Expo Push API に送信する。

        :param messages: NotificationPayload.to_wire() 形式の辞書のリスト。
        :raises GatewayDeliveryFailed: ゲートウェイが 4xx/5xx を返した場合。
        :raises GatewayConnectionError: 接続エラーやタイムアウト時。
        :raises GatewayResponseError: 2xx のボディが JSON でない場合。
        :return: ゲートウェイからの JSON レスポンス（成功時）。
        """
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    self.endpoint,
                    json=messages,
                    headers=self._build_headers(),
                )
        except httpx.RequestError as exc:  # 接続エラー・タイムアウトなど
            raise GatewayConnectionError(str(exc)) from exc

        if response.status_code // 100 != 2:
            raise GatewayDeliveryFailed(status_code=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as exc:
            raise GatewayResponseError(
                f"Push gateway returned a non-JSON response: {response.text[:200]}"
            ) from exc
