# backend/message_push/push/schemas.py

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PushPriority(str, Enum):
    """Expo Push API の priority。"""

    DEFAULT = "default"
    NORMAL = "normal"
    HIGH = "high"


class PushMessage(BaseModel):
    """
    /push/users/{user_id} のリクエストボディ。
    """

    title: str = Field(..., description="通知タイトル")
    body: str = Field(..., description="通知本文")
    data: Dict[str, Any] = Field(default_factory=dict, description="アプリへ渡す任意データ")
    sound: Optional[str] = Field("default", description="通知音。null の場合は 'default' を使う")
    priority: PushPriority = PushPriority.HIGH


class UserPushResult(BaseModel):
    """
    ユーザー宛て送信の結果。

    sent はゲートウェイが返したチケット数。errors が空の場合のみ success=True。
    """

    success: bool
    sent: int = 0
    errors: Optional[List[Dict[str, Any]]] = None
