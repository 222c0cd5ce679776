# backend/message_push/store/config.py

"""
データストア（Supabase REST API）接続に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache

from message_push.utils.config import get_env, get_env_int


@dataclass(frozen=True)
class StoreSettings:
    """Supabase REST API 用の設定値コンテナ。"""

    url: str
    service_role_key: str
    timeout_seconds: int = 10

    @property
    def rest_base_url(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1"


@lru_cache()
def get_store_settings() -> StoreSettings:
    """
    環境変数からストア設定を読み込む。

    必須:
      - SUPABASE_URL
      - SUPABASE_SERVICE_ROLE_KEY

    任意:
      - STORE_TIMEOUT_SECONDS（デフォルト 10秒）
    """
    url = get_env("SUPABASE_URL")
    service_role_key = get_env("SUPABASE_SERVICE_ROLE_KEY")
    timeout_seconds = get_env_int("STORE_TIMEOUT_SECONDS", default=10)

    return StoreSettings(
        url=url,
        service_role_key=service_role_key,
        timeout_seconds=timeout_seconds,
    )
