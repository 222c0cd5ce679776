"""
データストア（Supabase / PostgREST）読み取り用モジュール。

- config: ストア接続設定（URL, サービスロールキー, タイムアウト）
- schemas: Conversation / Profile / Preference / PushToken の内部モデル
- client: NotificationStore インターフェースと REST / インメモリ実装
"""

from .client import (  # noqa: F401
    InMemoryNotificationStore,
    NotificationStore,
    StoreClientError,
    StoreConnectionError,
    StoreHTTPError,
    SupabaseRestStore,
)
from .config import StoreSettings, get_store_settings  # noqa: F401
from .schemas import Conversation, DeviceType, Preference, Profile, PushToken  # noqa: F401
