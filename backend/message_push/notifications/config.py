# backend/message_push/notifications/config.py

"""
メッセージ通知ディスパッチャの設定値。

ロジック中に定数を散らさず、DispatcherConfig としてサービス生成時に注入する。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from message_push.utils.config import get_env, get_env_int

EXPO_TOKEN_PREFIXES: Tuple[str, ...] = ("ExponentPushToken[", "ExpoPushToken[")


@dataclass(frozen=True)
class DispatcherConfig:
    """ディスパッチャ用の設定値コンテナ。"""

    app_scheme: str = "proactiveai"
    token_prefixes: Tuple[str, ...] = EXPO_TOKEN_PREFIXES
    max_body_length: int = 100
    ellipsis: str = "..."
    notification_type: str = "networking_message"
    title_prefix: str = "💬"
    android_color: str = "#8B5CF6"
    android_channel_id: str = "default"
    default_sound: str = "default"
    default_priority: str = "high"
    fallback_sender_name: str = "Someone"

    def is_well_formed_token(self, token: str) -> bool:
        """トークンが既知のベンダープレフィックスで始まるかどうか。"""
        return bool(token) and token.startswith(self.token_prefixes)


@lru_cache()
def get_dispatcher_config() -> DispatcherConfig:
    """
    環境変数からディスパッチャ設定を読み込む。

    任意:
      - APP_DEEP_LINK_SCHEME（デフォルト proactiveai）
      - NOTIFICATION_MAX_BODY_LENGTH（デフォルト 100）
    """
    app_scheme = get_env("APP_DEEP_LINK_SCHEME", default="proactiveai", required=False)
    max_body_length = get_env_int("NOTIFICATION_MAX_BODY_LENGTH", default=100)

    return DispatcherConfig(
        app_scheme=app_scheme,
        max_body_length=max_body_length,
    )
