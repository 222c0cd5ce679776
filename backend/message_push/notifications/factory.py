# backend/message_push/notifications/factory.py

"""
MessageNotificationService のシンプルな状態管理モジュール。

- アプリ全体で共有する MessageNotificationService を環境変数の設定から生成する
- テスト時にフェイク実装へ差し替え・リセットできるようにする
"""

from __future__ import annotations

from typing import Optional

from message_push.gateway.client import ExpoPushClient
from message_push.gateway.config import get_push_gateway_settings
from message_push.store.client import SupabaseRestStore
from message_push.store.config import get_store_settings

from .config import get_dispatcher_config
from .service import MessageNotificationService

_service: Optional[MessageNotificationService] = None


def get_message_notification_service() -> MessageNotificationService:
    """
    共有の MessageNotificationService インスタンスを返す。

    初回呼び出し時にのみ生成し、それ以降は同じインスタンスを返す。
    """
    global _service
    if _service is None:
        store = SupabaseRestStore(get_store_settings())
        gateway = ExpoPushClient(get_push_gateway_settings())
        _service = MessageNotificationService(store, gateway, get_dispatcher_config())
    return _service


def set_message_notification_service(service: MessageNotificationService) -> None:
    """テスト用に共有インスタンスを差し替える。"""
    global _service
    _service = service


def reset_state() -> None:
    """
    テスト用にシングルトン状態をリセットする。
    """
    global _service
    _service = None
