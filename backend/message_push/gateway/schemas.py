# backend/message_push/gateway/schemas.py

"""
プッシュゲートウェイ（Expo Push API）とやり取りするメッセージのスキーマ定義。

フィールド名は Python 側では snake_case、送信時は alias（camelCase）で出力する。
ゲートウェイへ送るときは必ず to_wire() を使うこと。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AndroidOptions(BaseModel):
    """Android 向けの通知スタイル。"""

    model_config = ConfigDict(populate_by_name=True)

    channel_id: str = Field("default", alias="channelId")
    color: str = "#8B5CF6"
    priority: str = "high"
    sound: str = "default"


class IosOptions(BaseModel):
    """iOS 向けの通知スタイル。"""

    model_config = ConfigDict(populate_by_name=True)

    sound: str = "default"
    display_in_foreground: bool = Field(True, alias="_displayInForeground")


class MessageNotificationData(BaseModel):
    """
    通知タップ時にアプリへ渡す data ブロック。
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str = "networking_message"
    conversation_id: str = Field(..., alias="conversationId")
    sender_id: str = Field(..., alias="senderId")
    sender_name: str = Field(..., alias="senderName")
    deep_link: str = Field(..., alias="deepLink")


class NotificationPayload(BaseModel):
    """
    トークン 1件分のプッシュメッセージ。

    永続化はせず、ゲートウェイへの送信時にのみ使う。
    """

    model_config = ConfigDict(populate_by_name=True)

    destination_token: str = Field(..., alias="to")
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)
    sound: Optional[str] = "default"
    priority: Optional[str] = "high"
    channel_id: Optional[str] = Field(None, alias="channelId")
    android: Optional[AndroidOptions] = None
    ios: Optional[IosOptions] = None

    def to_wire(self) -> Dict[str, Any]:
        """ゲートウェイへ送る JSON オブジェクトを返す。"""
        return self.model_dump(by_alias=True, exclude_none=True)


class PushTicket(BaseModel):
    """
    Expo Push API が返すチケット 1件分。

    status == "error" の場合は message / details に理由が入る。
    """

    status: str
    id: Optional[str] = None
    message: Optional[str] = None
    details: Optional[Any] = None

    @property
    def is_error(self) -> bool:
        return self.status == "error"


def parse_tickets(result: Any) -> List[PushTicket]:
    """
    ゲートウェイのレスポンスボディから PushTicket のリストを取り出す。

    data がリストでない場合は空リストを返す。
    """
    if not isinstance(result, dict):
        return []

    data = result.get("data")
    if not isinstance(data, list):
        return []

    tickets: List[PushTicket] = []
    for item in data:
        if isinstance(item, dict) and isinstance(item.get("status"), str):
            tickets.append(PushTicket.model_validate(item))
    return tickets
