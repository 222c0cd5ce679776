# backend/message_push/store/client.py

"""
データストアとの通信を担当するクライアントモジュール。

- NotificationStore: ディスパッチャが必要とする読み取りクエリのインターフェース
- SupabaseRestStore: Supabase (PostgREST) の REST API を httpx で叩く本番実装
- InMemoryNotificationStore: テスト・ローカル開発用のインメモリ実装
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Set

import httpx

from .config import StoreSettings, get_store_settings
from .schemas import Conversation, Preference, Profile, PushToken

logger = logging.getLogger(__name__)


class StoreClientError(Exception):
    """ストアクライアント全般の基底例外。"""


class StoreHTTPError(StoreClientError):
    """HTTP ステータスコードがエラーだった場合の例外。"""

    def __init__(self, status_code: int, body: Any | None = None) -> None:
        super().__init__(f"Store API error: status_code={status_code}")
        self.status_code = status_code
        self.body = body


class StoreConnectionError(StoreClientError):
    """接続エラー・タイムアウト時の例外。"""


class NotificationStore(Protocol):
    """
    ディスパッチャが利用する読み取り専用クエリのインターフェース。

    いずれも「見つからない」は None / 空リストで返し、
    通信や問い合わせ自体の失敗は StoreClientError で通知する。
    """

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """会話を ID で取得する。"""

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """プロフィールを ID で取得する。"""

    def get_preference(self, user_id: str) -> Optional[Preference]:
        """通知設定を取得する（レコードが無ければ None）。"""

    def list_active_push_tokens(self, user_id: str) -> List[PushToken]:
        """is_active = true のプッシュトークンを全件取得する。"""


class SupabaseRestStore:
    """
    Supabase REST API (PostgREST) の薄いラッパー。

    サービスロールキーで認証し、各テーブルを select するだけで書き込みは行わない。
    """

    def __init__(self, settings: StoreSettings | None = None) -> None:
        self._settings = settings or get_store_settings()

    @property
    def timeout(self) -> int:
        return self._settings.timeout_seconds

    def _build_headers(self) -> Dict[str, str]:
        """
        Supabase REST API 呼び出しに必要なヘッダーを構築。
        """
        key = self._settings.service_role_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        }

    def _select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        テーブルに対して GET /rest/v1/<table> を発行し、行のリストを返す。

        :raises StoreHTTPError: 4xx/5xx が返った場合。
        :raises StoreConnectionError: 接続エラーやタイムアウト時。
        """
        url = f"{self._settings.rest_base_url}/{table}"
        logger.debug("Store select: table=%s params=%s", table, params)

        try:
            response = httpx.get(
                url,
                headers=self._build_headers(),
                params=params,
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise StoreConnectionError(f"Failed to call store API: {exc}") from exc

        if response.status_code // 100 != 2:
            raise StoreHTTPError(status_code=response.status_code, body=response.text)

        try:
            rows = response.json()
        except ValueError as exc:
            raise StoreClientError("Store API returned a non-JSON response.") from exc

        if not isinstance(rows, list):
            raise StoreClientError("Unexpected store response format: rows is not a list.")

        return [row for row in rows if isinstance(row, dict)]

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        rows = self._select(
            "networking_conversations",
            {"select": "id,user_id_1,user_id_2", "id": f"eq.{conversation_id}", "limit": "1"},
        )
        if not rows:
            return None

        row = rows[0]
        return Conversation(
            id=str(row.get("id") or conversation_id),
            participant_a=str(row.get("user_id_1")),
            participant_b=str(row.get("user_id_2")),
        )

    def get_profile(self, user_id: str) -> Optional[Profile]:
        rows = self._select(
            "profiles",
            {"select": "id,full_name,email", "id": f"eq.{user_id}", "limit": "1"},
        )
        if not rows:
            return None

        row = rows[0]
        return Profile(
            id=str(row.get("id") or user_id),
            display_name=row.get("full_name"),
            email=row.get("email"),
        )

    def get_preference(self, user_id: str) -> Optional[Preference]:
        rows = self._select(
            "user_preferences",
            {"select": "user_id,notification_enabled", "user_id": f"eq.{user_id}", "limit": "1"},
        )
        if not rows:
            return None

        enabled = rows[0].get("notification_enabled")
        # NULL は「明示的な無効化」ではないので有効扱い
        return Preference(user_id=user_id, notifications_enabled=enabled is not False)

    def list_active_push_tokens(self, user_id: str) -> List[PushToken]:
        rows = self._select(
            "user_push_tokens",
            {
                "select": "push_token,device_type,is_active",
                "user_id": f"eq.{user_id}",
                "is_active": "eq.true",
            },
        )

        tokens: List[PushToken] = []
        for row in rows:
            value = row.get("push_token")
            if not isinstance(value, str) or not value:
                continue
            tokens.append(
                PushToken(
                    user_id=user_id,
                    token=value,
                    device_type=row.get("device_type"),
                    is_active=True,
                )
            )
        return tokens


class InMemoryNotificationStore:
    """
    テスト・開発用のインメモリストア。

    - 実ネットワークには一切アクセスしない
    - failing に含めたメソッド名は StoreConnectionError を投げる
    """

    def __init__(
        self,
        *,
        conversations: Iterable[Conversation] = (),
        profiles: Iterable[Profile] = (),
        preferences: Iterable[Preference] = (),
        push_tokens: Iterable[PushToken] = (),
        failing: Iterable[str] = (),
    ) -> None:
        self.conversations: Dict[str, Conversation] = {c.id: c for c in conversations}
        self.profiles: Dict[str, Profile] = {p.id: p for p in profiles}
        self.preferences: Dict[str, Preference] = {p.user_id: p for p in preferences}
        self.push_tokens: List[PushToken] = list(push_tokens)
        self.failing: Set[str] = set(failing)
        self.calls: List[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise StoreConnectionError(f"{name} failed (simulated)")

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        self._record("get_conversation")
        return self.conversations.get(conversation_id)

    def get_profile(self, user_id: str) -> Optional[Profile]:
        self._record("get_profile")
        return self.profiles.get(user_id)

    def get_preference(self, user_id: str) -> Optional[Preference]:
        self._record("get_preference")
        return self.preferences.get(user_id)

    def list_active_push_tokens(self, user_id: str) -> List[PushToken]:
        self._record("list_active_push_tokens")
        return [t for t in self.push_tokens if t.user_id == user_id and t.is_active]
