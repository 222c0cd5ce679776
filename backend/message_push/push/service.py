# backend/message_push/push/service.py

"""
任意のユーザーへ汎用プッシュを送るサービス層。

メッセージ通知ディスパッチャとは異なり、
- トークンを 100件ずつのチャンクに分けて送る
- チャンク単位の失敗は記録して残りのチャンクは送り続ける
- チケット単位のエラーも errors に集める
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from message_push.gateway.client import GatewayDeliveryFailed, PushGateway, PushGatewayError
from message_push.gateway.schemas import NotificationPayload, parse_tickets
from message_push.notifications.config import DispatcherConfig
from message_push.store.client import NotificationStore, StoreClientError

from .schemas import PushMessage, UserPushResult

logger = logging.getLogger(__name__)

# Expo 推奨の 1リクエストあたり最大メッセージ数
MAX_MESSAGES_PER_REQUEST = 100


class UserPushService:
    """
    user_id の有効なトークン全てに PushMessage を送る。
    """

    def __init__(
        self,
        store: NotificationStore,
        gateway: PushGateway,
        config: Optional[DispatcherConfig] = None,
        *,
        chunk_size: int = MAX_MESSAGES_PER_REQUEST,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._config = config or DispatcherConfig()
        self._chunk_size = max(1, int(chunk_size))

    def send_to_user(self, user_id: str, message: PushMessage) -> UserPushResult:
        try:
            rows = self._store.list_active_push_tokens(user_id)
        except StoreClientError as exc:
            logger.error("Failed to load user tokens: user_id=%s error=%s", user_id, exc)
            return UserPushResult(success=False, sent=0, errors=[{"message": str(exc)}])

        tokens = [row.token for row in rows if self._config.is_well_formed_token(row.token)]
        if not tokens:
            logger.info("No valid active tokens: user_id=%s", user_id)
            return UserPushResult(success=True, sent=0)

        errors: List[Dict[str, Any]] = []
        sent_count = 0

        for start in range(0, len(tokens), self._chunk_size):
            chunk = tokens[start : start + self._chunk_size]
            messages = [self._build_payload(token, message).to_wire() for token in chunk]

            try:
                result = self._gateway.send(messages)
            except GatewayDeliveryFailed as exc:
                logger.error(
                    "Push chunk rejected: user_id=%s status=%s body=%s",
                    user_id,
                    exc.status_code,
                    exc.body,
                )
                errors.append({"status": exc.status_code, "message": exc.body})
                continue
            except PushGatewayError as exc:
                logger.error("Push chunk failed: user_id=%s error=%s", user_id, exc)
                errors.append({"message": str(exc)})
                continue

            tickets = parse_tickets(result)
            sent_count += len(tickets)
            errors.extend(t.model_dump(exclude_none=True) for t in tickets if t.is_error)

        return UserPushResult(
            success=not errors,
            sent=sent_count,
            errors=errors or None,
        )

    def _build_payload(self, token: str, message: PushMessage) -> NotificationPayload:
        return NotificationPayload(
            destination_token=token,
            title=message.title,
            body=message.body,
            data=dict(message.data),
            sound=message.sound if message.sound is not None else self._config.default_sound,
            priority=message.priority.value,
        )
