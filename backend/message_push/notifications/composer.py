# backend/message_push/notifications/composer.py

"""
プッシュ通知ペイロードの組み立て。

- 本文の切り詰め（最大 max_body_length 文字。超える場合は末尾を ellipsis に置き換える）
- ディープリンクの生成
- トークンごとの NotificationPayload 生成

Android / iOS のスタイルブロックは、トークンの device_type に関係なく両方とも付与する。
"""

from __future__ import annotations

from typing import Iterable, List
from urllib.parse import quote

from message_push.gateway.schemas import (
    AndroidOptions,
    IosOptions,
    MessageNotificationData,
    NotificationPayload,
)

from .config import DispatcherConfig

# encodeURIComponent と同じく、これらの記号はエスケープしない
_URI_COMPONENT_SAFE = "!~*'()"


def truncate_content(content: str, max_length: int = 100, ellipsis: str = "...") -> str:
    """
    max_length を超える本文を「先頭 (max_length - len(ellipsis)) 文字 + ellipsis」にする。

    max_length 以下ならそのまま返す。
    """
    if len(content) <= max_length:
        return content
    return content[: max_length - len(ellipsis)] + ellipsis


def build_deep_link(app_scheme: str, conversation_id: str, sender_name: str) -> str:
    """<scheme>://networking/chat/<conversation_id>?name=<url-encoded sender name>"""
    encoded_name = quote(sender_name, safe=_URI_COMPONENT_SAFE)
    return f"{app_scheme}://networking/chat/{conversation_id}?name={encoded_name}"


class NotificationComposer:
    """
    トークン一覧とイベント内容から NotificationPayload のリストを作る。
    """

    def __init__(self, config: DispatcherConfig) -> None:
        self._config = config

    def compose(
        self,
        tokens: Iterable[str],
        *,
        content: str,
        sender_name: str,
        conversation_id: str,
        sender_id: str,
    ) -> List[NotificationPayload]:
        config = self._config

        body = truncate_content(content, config.max_body_length, config.ellipsis)
        deep_link = build_deep_link(config.app_scheme, conversation_id, sender_name)
        title = f"{config.title_prefix} {sender_name}"
        data = MessageNotificationData(
            type=config.notification_type,
            conversation_id=conversation_id,
            sender_id=sender_id,
            sender_name=sender_name,
            deep_link=deep_link,
        ).model_dump(by_alias=True)

        return [
            NotificationPayload(
                destination_token=token,
                title=title,
                body=body,
                data=dict(data),
                sound=config.default_sound,
                priority=config.default_priority,
                channel_id=config.android_channel_id,
                android=AndroidOptions(
                    channel_id=config.android_channel_id,
                    color=config.android_color,
                    priority=config.default_priority,
                    sound=config.default_sound,
                ),
                ios=IosOptions(sound=config.default_sound, display_in_foreground=True),
            )
            for token in tokens
        ]
