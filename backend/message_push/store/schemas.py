# backend/message_push/store/schemas.py

"""
ストアから読み取るレコードの内部モデル。

いずれもディスパッチャからは読み取り専用で、更新は行わない。
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class DeviceType(str, Enum):
    """プッシュトークンを登録した端末種別。"""

    IOS = "ios"
    ANDROID = "android"
    OTHER = "other"


class Conversation(BaseModel):
    """
    1対1 の会話レコード（networking_conversations）。

    participant_a != participant_b であることはストア側の責務とする。
    """

    id: str = Field(..., description="会話 ID")
    participant_a: str = Field(..., description="user_id_1")
    participant_b: str = Field(..., description="user_id_2")

    def other_participant(self, sender_id: str) -> str:
        """
        sender_id ではない側の参加者 ID を返す。

        sender_id がどちらにも一致しない場合は participant_a を返す
        （既存の振る舞いをそのまま維持する）。
        """
        if self.participant_a == sender_id:
            return self.participant_b
        return self.participant_a


class Profile(BaseModel):
    """送信者の表示名を決めるためのプロフィール（profiles）。"""

    id: str
    display_name: Optional[str] = Field(None, description="full_name")
    email: Optional[str] = None


class Preference(BaseModel):
    """通知設定（user_preferences）。レコードが無い場合は「有効」扱い。"""

    user_id: str
    notifications_enabled: bool = True


class PushToken(BaseModel):
    """
    端末のプッシュトークン（user_push_tokens）。
    """

    user_id: str
    token: str = Field(..., description="push_token")
    device_type: DeviceType = DeviceType.OTHER
    is_active: bool = True

    @field_validator("device_type", mode="before")
    @classmethod
    def _coerce_device_type(cls, value: object) -> object:
        # 想定外の値・未設定は OTHER に寄せる
        if isinstance(value, DeviceType):
            return value
        if isinstance(value, str) and value.lower() in {d.value for d in DeviceType}:
            return value.lower()
        return DeviceType.OTHER
