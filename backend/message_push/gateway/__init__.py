"""
Expo プッシュゲートウェイ連携モジュール。

- config: ゲートウェイのエンドポイント, アクセストークン, タイムアウト
- schemas: ゲートウェイへ送るメッセージとチケットのモデル
- client: PushGateway インターフェースと ExpoPushClient
"""

from .client import (  # noqa: F401
    ExpoPushClient,
    GatewayConnectionError,
    GatewayDeliveryFailed,
    GatewayResponseError,
    PushGateway,
    PushGatewayError,
)
from .config import PushGatewaySettings, get_push_gateway_settings  # noqa: F401
