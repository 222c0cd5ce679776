# backend/message_push/gateway/config.py

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from message_push.utils.config import get_env, get_env_int

DEFAULT_EXPO_PUSH_ENDPOINT = "https://exp.host/--/api/v2/push/send"


@dataclass(frozen=True)
class PushGatewaySettings:
    """
    Expo プッシュゲートウェイ関連の設定値。
    """

    endpoint: str = DEFAULT_EXPO_PUSH_ENDPOINT
    access_token: Optional[str] = None
    timeout_seconds: int = 10


@lru_cache()
def get_push_gateway_settings() -> PushGatewaySettings:
    """
    プッシュゲートウェイ設定値を環境変数から読み出す。

    任意:
      - EXPO_PUSH_ENDPOINT（デフォルト https://exp.host/--/api/v2/push/send）
      - EXPO_ACCESS_TOKEN（設定時のみ Authorization ヘッダを付与）
      - PUSH_GATEWAY_TIMEOUT_SECONDS（デフォルト 10秒）
    """
    endpoint = get_env("EXPO_PUSH_ENDPOINT", default=DEFAULT_EXPO_PUSH_ENDPOINT, required=False)
    access_token = get_env("EXPO_ACCESS_TOKEN", default=None, required=False)
    timeout_seconds = get_env_int("PUSH_GATEWAY_TIMEOUT_SECONDS", default=10)

    return PushGatewaySettings(
        endpoint=endpoint,
        access_token=access_token,
        timeout_seconds=timeout_seconds,
    )
