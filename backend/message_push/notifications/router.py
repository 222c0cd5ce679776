# backend/message_push/notifications/router.py

"""
メッセージ作成イベントを受け取るエンドポイント。

- POST /functions/v1/send-message-notification

POST 以外も受け付けてバリデータで 405 を返すため、主要メソッドを全て登録している。
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from . import factory
from .schemas import DispatchFailure, DispatchResult, DispatchStatus
from .validator import BadRequestError, MethodNotAllowedError, validate_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["notifications"])


def _json(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


def to_response(result: DispatchResult) -> JSONResponse:
    """
    DispatchResult を HTTP ステータスとボディに変換する。
    """
    if result.status == DispatchStatus.SUCCEEDED:
        return _json(
            status.HTTP_200_OK,
            {"success": True, "sent": result.sent, "result": result.result},
        )

    if result.status == DispatchStatus.NO_OP:
        return _json(status.HTTP_200_OK, {"success": True, "message": result.message})

    if result.failure == DispatchFailure.CONVERSATION_NOT_FOUND:
        return _json(status.HTTP_404_NOT_FOUND, {"error": "Conversation not found"})

    if result.failure == DispatchFailure.GATEWAY_UNREACHABLE:
        # 接続エラー・タイムアウトはゲートウェイの拒否ではなく内部エラー扱い
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": "Internal server error", "message": result.details or ""},
        )

    return _json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"error": "Failed to send push notification", "details": result.details or ""},
    )


@router.api_route(
    "/send-message-notification",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    summary="メッセージ作成時に受信者へプッシュ通知を送る",
    description=(
        "body: {conversationId, senderId, content}。"
        "受信者の通知設定と有効なプッシュトークンを確認し、Expo Push API へまとめて送信する。"
    ),
)
async def send_message_notification(request: Request) -> JSONResponse:
    """
    メッセージ通知のエンドポイント。

    - POST 以外 → 405
    - ボディ不正 → 400
    - それ以外は MessageNotificationService.dispatch() の結果を to_response() で変換
    - 想定外の例外 → 500（呼び出し元をクラッシュさせない）
    """
    try:
        event = validate_event(request.method, await request.body())
    except MethodNotAllowedError:
        return _json(status.HTTP_405_METHOD_NOT_ALLOWED, {"error": "Method not allowed"})
    except BadRequestError as exc:
        return _json(
            status.HTTP_400_BAD_REQUEST,
            {"error": "Invalid request body", "details": exc.errors or [str(exc)]},
        )

    try:
        service = factory.get_message_notification_service()
        # ストア・ゲートウェイ呼び出しはブロッキングなのでスレッドプールで実行
        result = await run_in_threadpool(service.dispatch, event)
    except Exception as exc:  # noqa: BLE001 - ホストを落とさない
        logger.exception(
            "Unhandled error while dispatching: conversation_id=%s", event.conversation_id
        )
        return _json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": "Internal server error", "message": str(exc)},
        )

    return to_response(result)
