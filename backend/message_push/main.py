# backend/message_push/main.py

"""
バックエンドアプリケーションのエントリーポイント。

主な責務:
- /functions/v1/send-message-notification エンドポイントを公開する
- /push/users/{user_id} エンドポイントを公開する
"""

from fastapi import FastAPI

from message_push.notifications.router import router as notifications_router
from message_push.push.router import router as push_router


def create_app() -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    - メッセージ通知エンドポイント (/functions/v1/send-message-notification)
    - 汎用プッシュ送信エンドポイント (/push/users/{user_id})
    - ヘルスチェックエンドポイント (/health)
    """
    app = FastAPI(title="Message Push Backend")

    # ルーター登録
    app.include_router(notifications_router)
    app.include_router(push_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        モニタリングや動作確認用。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
