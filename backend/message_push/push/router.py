# backend/message_push/push/router.py

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status

from message_push.gateway.client import ExpoPushClient
from message_push.gateway.config import get_push_gateway_settings
from message_push.notifications.config import get_dispatcher_config
from message_push.store.client import SupabaseRestStore
from message_push.store.config import get_store_settings

from .schemas import PushMessage, UserPushResult
from .service import UserPushService

router = APIRouter(prefix="/push", tags=["push"])


@lru_cache()
def get_user_push_service() -> UserPushService:
    """
    UserPushService のシングルトンインスタンスを取得する。

    NOTE:
      - テストでは app.dependency_overrides で差し替える前提。
    """
    return UserPushService(
        SupabaseRestStore(get_store_settings()),
        ExpoPushClient(get_push_gateway_settings()),
        get_dispatcher_config(),
    )


@router.post(
    "/users/{user_id}",
    response_model=UserPushResult,
    response_model_exclude_none=True,
    summary="ユーザーの全端末へプッシュ送信",
)
def push_to_user(
    user_id: str,
    body: PushMessage,
    service: UserPushService = Depends(get_user_push_service),
) -> UserPushResult:
    """
    user_id の有効なプッシュトークン全てへ通知を送る。

    - 送信の部分失敗は 200 + success=false + errors で返す
    - 想定外の内部エラー → 500 Internal Server Error
    """
    try:
        return service.send_to_user(user_id, body)
    except Exception as exc:  # noqa: BLE001
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while sending push.",
        ) from exc
