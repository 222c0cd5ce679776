# backend/message_push/notifications/validator.py

"""
受信リクエストの検証（パイプラインの入口）。

副作用は持たず、検証に通ったものだけを NotificationEvent としてパイプラインに渡す。
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from pydantic import ValidationError

from .schemas import NotificationEvent

ALLOWED_METHOD = "POST"


class EventValidationError(ValueError):
    """イベント検証エラーの基底例外。"""


class MethodNotAllowedError(EventValidationError):
    """POST 以外のメソッドで呼ばれた場合の例外。"""

    def __init__(self, method: str) -> None:
        super().__init__(f"Method not allowed: {method}")
        self.method = method


class BadRequestError(EventValidationError):
    """ボディが JSON でない・必須フィールドが欠けている・型が違う場合の例外。"""

    def __init__(self, message: str, errors: Optional[List[Any]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def validate_event(method: str, raw_body: bytes | str | None) -> NotificationEvent:
    """
    HTTP メソッドと生のボディを検証し、NotificationEvent を返す。

    :raises MethodNotAllowedError: POST 以外の場合。
    :raises BadRequestError: ボディが不正な場合。
    """
    if method.upper() != ALLOWED_METHOD:
        raise MethodNotAllowedError(method)

    if not raw_body:
        raise BadRequestError("Request body is empty.")

    try:
        payload = json.loads(raw_body)
    except ValueError as exc:
        raise BadRequestError("Request body is not valid JSON.") from exc

    if not isinstance(payload, dict):
        raise BadRequestError("Request body must be a JSON object.")

    try:
        return NotificationEvent.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise BadRequestError("Request body failed validation.", errors=errors) from exc
