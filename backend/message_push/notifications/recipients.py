# backend/message_push/notifications/recipients.py

"""
ストア読み取りを伴うパイプラインの各段階。

- RecipientResolver: 会話から受信者（送信者ではない側）を決める
- SenderNameResolver: 送信者の表示名を決める（失敗しない）
- PreferenceGate: 受信者の通知設定を確認する
- TokenProvider: 受信者の有効なプッシュトークンを集める

各段階は「先へ進むか / no-op で止めるか」を戻り値で明示し、
ストア側の例外はここで吸収するか、呼び出し元に判断材料として返す。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from message_push.store.client import NotificationStore, StoreClientError

from .config import DispatcherConfig
from .schemas import NoOpReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipientLookup:
    """受信者解決の結果。recipient_id が None なら会話が見つからなかった。"""

    recipient_id: Optional[str]
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.recipient_id is not None


@dataclass(frozen=True)
class GateDecision:
    """PreferenceGate の判定結果。"""

    allowed: bool
    reason: Optional[NoOpReason] = None


@dataclass(frozen=True)
class TokenSelection:
    """TokenProvider の結果。skip_reason があれば no-op で終了する。"""

    tokens: List[str] = field(default_factory=list)
    skip_reason: Optional[NoOpReason] = None
    dropped: int = 0


class RecipientResolver:
    """会話レコードから受信者を決める。"""

    def __init__(self, store: NotificationStore) -> None:
        self._store = store

    def resolve(self, conversation_id: str, sender_id: str) -> RecipientLookup:
        """
        受信者 ID を返す。

        - 会話が無い / 取得に失敗した → recipient_id=None（呼び出し側で 404 扱い）
        - sender_id がどちらの参加者にも一致しない場合でも participant_a を返す
        """
        try:
            conversation = self._store.get_conversation(conversation_id)
        except StoreClientError as exc:
            logger.error(
                "Conversation lookup failed: conversation_id=%s error=%s",
                conversation_id,
                exc,
            )
            return RecipientLookup(recipient_id=None, error=str(exc))

        if conversation is None:
            logger.error("Conversation not found: conversation_id=%s", conversation_id)
            return RecipientLookup(recipient_id=None)

        if sender_id not in (conversation.participant_a, conversation.participant_b):
            logger.warning(
                "Sender is not a participant: conversation_id=%s sender_id=%s",
                conversation_id,
                sender_id,
            )

        return RecipientLookup(recipient_id=conversation.other_participant(sender_id))


class SenderNameResolver:
    """
    送信者の表示名を決める。

    display_name → email のローカル部 → fallback_sender_name の順。
    プロフィールが無い・取得に失敗した場合も例外は投げない。
    """

    def __init__(self, store: NotificationStore, config: DispatcherConfig) -> None:
        self._store = store
        self._fallback = config.fallback_sender_name

    def resolve(self, sender_id: str) -> str:
        try:
            profile = self._store.get_profile(sender_id)
        except StoreClientError as exc:
            logger.warning("Profile lookup failed: sender_id=%s error=%s", sender_id, exc)
            return self._fallback

        if profile is None:
            return self._fallback

        if profile.display_name:
            return profile.display_name

        if profile.email:
            local_part = profile.email.split("@", 1)[0]
            if local_part:
                return local_part

        return self._fallback


class PreferenceGate:
    """受信者が通知を無効化しているかどうかを確認する。"""

    def __init__(self, store: NotificationStore) -> None:
        self._store = store

    def check(self, recipient_id: str) -> GateDecision:
        """
        明示的に notifications_enabled=False の場合のみ止める。
        レコードが無い・取得に失敗した場合は許可（default-allow）。
        """
        try:
            preference = self._store.get_preference(recipient_id)
        except StoreClientError as exc:
            logger.warning(
                "Preference lookup failed, treating as enabled: recipient_id=%s error=%s",
                recipient_id,
                exc,
            )
            return GateDecision(allowed=True)

        if preference is not None and preference.notifications_enabled is False:
            return GateDecision(allowed=False, reason=NoOpReason.NOTIFICATIONS_DISABLED)

        return GateDecision(allowed=True)


class TokenProvider:
    """受信者の有効なプッシュトークンを集める。"""

    def __init__(self, store: NotificationStore, config: DispatcherConfig) -> None:
        self._store = store
        self._config = config

    def load(self, recipient_id: str) -> TokenSelection:
        """
        is_active なトークンのうち、形式が正しいものだけを返す。

        - 取得失敗 / 0件 → NO_ACTIVE_TOKENS
        - 形式チェック後に 0件 → NO_VALID_TOKENS
        """
        try:
            rows = self._store.list_active_push_tokens(recipient_id)
        except StoreClientError as exc:
            logger.warning(
                "Token lookup failed, skipping notification: recipient_id=%s error=%s",
                recipient_id,
                exc,
            )
            return TokenSelection(skip_reason=NoOpReason.NO_ACTIVE_TOKENS)

        active = [row for row in rows if row.is_active]
        if not active:
            return TokenSelection(skip_reason=NoOpReason.NO_ACTIVE_TOKENS)

        logger.info("Found %d active tokens: recipient_id=%s", len(active), recipient_id)

        valid = [row.token for row in active if self._config.is_well_formed_token(row.token)]
        dropped = len(active) - len(valid)
        if dropped:
            logger.warning(
                "Dropped %d malformed push tokens: recipient_id=%s", dropped, recipient_id
            )

        if not valid:
            return TokenSelection(skip_reason=NoOpReason.NO_VALID_TOKENS, dropped=dropped)

        return TokenSelection(tokens=valid, dropped=dropped)
