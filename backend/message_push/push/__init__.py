"""
任意のユーザーへの汎用プッシュ送信。

- schemas: PushMessage / UserPushResult
- service: UserPushService（トークン取得 → 100件ずつチャンク送信）
- router: /push/users/{user_id} エンドポイント
"""

from .schemas import PushMessage, UserPushResult  # noqa: F401
from .service import UserPushService  # noqa: F401
