# backend/message_push/notifications/service.py

"""
メッセージ通知ディスパッチャのサービス層。

1 件のメッセージ作成イベントに対して、以下を同期的に順番に実行する:

  受信者解決 → 送信者名解決 → 通知設定確認 → トークン取得 → ペイロード組み立て → 送信

- 受信者解決・送信で失敗した場合は FAILED
- 通知無効 / トークン無し / 有効なトークン無しは NO_OP（エラーではない）
- それ以外の想定外の例外は呼び出し元（router）で 500 として扱う
"""

from __future__ import annotations

import logging
from typing import Optional

from message_push.gateway.client import (
    GatewayConnectionError,
    GatewayDeliveryFailed,
    PushGateway,
)
from message_push.store.client import NotificationStore

from .composer import NotificationComposer
from .config import DispatcherConfig
from .dispatcher import PushDispatcher
from .recipients import PreferenceGate, RecipientResolver, SenderNameResolver, TokenProvider
from .schemas import (
    DispatchFailure,
    DispatchResult,
    DispatchStage,
    DispatchStatus,
    NotificationEvent,
)

logger = logging.getLogger(__name__)


class MessageNotificationService:
    """
    メッセージ作成イベントから受信者へのプッシュ通知を送るサービス。

    ストアとゲートウェイは外部から注入する（テストではインメモリ実装・フェイクを渡す）。
    インスタンスは状態を持たないので、同時に複数のイベントを処理してもよい。
    """

    def __init__(
        self,
        store: NotificationStore,
        gateway: PushGateway,
        config: Optional[DispatcherConfig] = None,
    ) -> None:
        self._config = config or DispatcherConfig()
        self._recipients = RecipientResolver(store)
        self._sender_names = SenderNameResolver(store, self._config)
        self._preferences = PreferenceGate(store)
        self._tokens = TokenProvider(store, self._config)
        self._composer = NotificationComposer(self._config)
        self._dispatcher = PushDispatcher(gateway)

    @property
    def config(self) -> DispatcherConfig:
        return self._config

    def dispatch(self, event: NotificationEvent) -> DispatchResult:
        """
        イベント 1 件分のパイプラインを実行し、DispatchResult を返す。
        """
        conversation_id = event.conversation_id
        logger.info(
            "Processing notification: conversation_id=%s sender_id=%s",
            conversation_id,
            event.sender_id,
        )

        # 1. 受信者解決
        stage = DispatchStage.RESOLVING_RECIPIENT
        lookup = self._recipients.resolve(conversation_id, event.sender_id)
        if not lookup.found:
            return DispatchResult.failed(
                stage,
                DispatchFailure.CONVERSATION_NOT_FOUND,
                details=lookup.error,
            )

        recipient_id = lookup.recipient_id
        logger.info(
            "Recipient resolved: conversation_id=%s recipient_id=%s",
            conversation_id,
            recipient_id,
        )

        sender_name = self._sender_names.resolve(event.sender_id)

        # 2. 通知設定
        stage = DispatchStage.CHECKING_PREFERENCE
        decision = self._preferences.check(recipient_id)
        if not decision.allowed:
            logger.info(
                "Notifications disabled: conversation_id=%s recipient_id=%s stage=%s",
                conversation_id,
                recipient_id,
                stage.value,
            )
            return DispatchResult.no_op(stage, decision.reason, recipient_id=recipient_id)

        # 3. トークン
        stage = DispatchStage.LOADING_TOKENS
        selection = self._tokens.load(recipient_id)
        if selection.skip_reason is not None:
            logger.info(
                "Nothing to send (%s): conversation_id=%s recipient_id=%s stage=%s",
                selection.skip_reason.value,
                conversation_id,
                recipient_id,
                stage.value,
            )
            return DispatchResult.no_op(stage, selection.skip_reason, recipient_id=recipient_id)

        # 4. 組み立て
        stage = DispatchStage.COMPOSING
        payloads = self._composer.compose(
            selection.tokens,
            content=event.content,
            sender_name=sender_name,
            conversation_id=conversation_id,
            sender_id=event.sender_id,
        )

        # 5. 送信
        stage = DispatchStage.DISPATCHING
        try:
            receipt = self._dispatcher.dispatch(payloads)
        except GatewayDeliveryFailed as exc:
            logger.error(
                "Push gateway rejected batch: conversation_id=%s recipient_id=%s status=%s body=%s",
                conversation_id,
                recipient_id,
                exc.status_code,
                exc.body,
            )
            return DispatchResult.failed(
                stage,
                DispatchFailure.GATEWAY_REJECTED,
                details=exc.body,
                recipient_id=recipient_id,
            )
        except GatewayConnectionError as exc:
            logger.error(
                "Push gateway unreachable: conversation_id=%s recipient_id=%s error=%s",
                conversation_id,
                recipient_id,
                exc,
            )
            return DispatchResult.failed(
                stage,
                DispatchFailure.GATEWAY_UNREACHABLE,
                details=str(exc),
                recipient_id=recipient_id,
            )

        logger.info(
            "Push sent successfully: conversation_id=%s recipient_id=%s sent=%d",
            conversation_id,
            recipient_id,
            receipt.sent,
        )
        return DispatchResult(
            status=DispatchStatus.SUCCEEDED,
            stage=stage,
            sent=receipt.sent,
            result=receipt.result,
            recipient_id=recipient_id,
            ticket_errors=[t.model_dump(exclude_none=True) for t in receipt.ticket_errors],
        )
