# backend/message_push/notifications/schemas.py

"""
メッセージ通知ディスパッチャの入出力スキーマ。

- NotificationEvent: メッセージ作成イベント（入力）
- DispatchStage: パイプラインの段階（ログ・失敗箇所の特定用）
- DispatchResult: パイプライン 1回分の結果（succeeded / no_op / failed）
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class NotificationEvent(BaseModel):
    """
    新規メッセージ作成イベント。

    content は空文字でもよいが文字列であること。
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    conversation_id: StrictStr = Field(..., alias="conversationId")
    sender_id: StrictStr = Field(..., alias="senderId")
    content: StrictStr


class DispatchStage(str, Enum):
    """パイプラインの段階。前方向にのみ遷移する。"""

    VALIDATING = "validating"
    RESOLVING_RECIPIENT = "resolving_recipient"
    CHECKING_PREFERENCE = "checking_preference"
    LOADING_TOKENS = "loading_tokens"
    COMPOSING = "composing"
    DISPATCHING = "dispatching"


class DispatchStatus(str, Enum):
    """パイプラインの終端状態。"""

    SUCCEEDED = "succeeded"
    NO_OP = "no_op"
    FAILED = "failed"


class DispatchFailure(str, Enum):
    """failed 時の失敗種別。"""

    CONVERSATION_NOT_FOUND = "conversation_not_found"
    GATEWAY_REJECTED = "gateway_rejected"
    GATEWAY_UNREACHABLE = "gateway_unreachable"


class NoOpReason(str, Enum):
    """no_op 時の理由（レスポンスの message にそのまま使う）。"""

    NOTIFICATIONS_DISABLED = "Notifications disabled for user"
    NO_ACTIVE_TOKENS = "No active tokens"
    NO_VALID_TOKENS = "No valid tokens"


class DispatchResult(BaseModel):
    """
    ディスパッチ 1回分の結果。

    - SUCCEEDED: sent >= 1 かつ result にゲートウェイのレスポンス
    - NO_OP: 送るものが無かった（message に理由）
    - FAILED: failure に種別、details にゲートウェイ等の診断情報
    """

    status: DispatchStatus
    stage: DispatchStage
    sent: int = Field(0, ge=0)
    message: Optional[str] = None
    result: Optional[Any] = None
    failure: Optional[DispatchFailure] = None
    details: Optional[str] = None
    recipient_id: Optional[str] = None
    ticket_errors: List[dict] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status in (DispatchStatus.SUCCEEDED, DispatchStatus.NO_OP)

    @classmethod
    def no_op(
        cls, stage: DispatchStage, reason: NoOpReason, recipient_id: Optional[str] = None
    ) -> "DispatchResult":
        return cls(
            status=DispatchStatus.NO_OP,
            stage=stage,
            message=reason.value,
            recipient_id=recipient_id,
        )

    @classmethod
    def failed(
        cls,
        stage: DispatchStage,
        failure: DispatchFailure,
        details: Optional[str] = None,
        recipient_id: Optional[str] = None,
    ) -> "DispatchResult":
        return cls(
            status=DispatchStatus.FAILED,
            stage=stage,
            failure=failure,
            details=details,
            recipient_id=recipient_id,
        )
