# backend/message_push/notifications/dispatcher.py

"""
組み立て済みペイロードをプッシュゲートウェイへまとめて送信する。

ゲートウェイ呼び出しは PushGateway インターフェースの裏に隔離しているので、
リトライ等を足す場合はゲートウェイ実装側を差し替えればよい。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List

from message_push.gateway.client import PushGateway
from message_push.gateway.schemas import NotificationPayload, PushTicket, parse_tickets

logger = logging.getLogger(__name__)


@dataclass
class DispatchReceipt:
    """送信成功時の受領情報。"""

    sent: int
    result: Any
    ticket_errors: List[PushTicket] = field(default_factory=list)


class PushDispatcher:
    """NotificationPayload のリストを 1 回のゲートウェイ呼び出しで送る。"""

    def __init__(self, gateway: PushGateway) -> None:
        self._gateway = gateway

    def dispatch(self, payloads: List[NotificationPayload]) -> DispatchReceipt:
        """
        :raises GatewayDeliveryFailed: ゲートウェイがバッチを拒否した場合。
        :raises GatewayConnectionError: 接続エラーやタイムアウト時。
        """
        messages = [payload.to_wire() for payload in payloads]
        result = self._gateway.send(messages)

        ticket_errors = [ticket for ticket in parse_tickets(result) if ticket.is_error]
        for ticket in ticket_errors:
            # バッチ自体は受理されているので結果は変えない
            logger.warning(
                "Push ticket error: message=%s details=%s", ticket.message, ticket.details
            )

        return DispatchReceipt(sent=len(payloads), result=result, ticket_errors=ticket_errors)
