"""
メッセージ通知ディスパッチャ。

- config: DispatcherConfig（ディープリンク scheme, トークン形式, 本文の最大長など）
- schemas: NotificationEvent / DispatchResult などの入出力モデル
- validator: 受信リクエストの検証（405 / 400）
- recipients: 受信者解決・送信者名・通知設定・トークン取得
- composer: プッシュ通知ペイロードの組み立て
- dispatcher: ゲートウェイへのバッチ送信
- service: パイプライン全体のオーケストレーション
- factory: 共有サービスインスタンスの生成
- router: /functions/v1/send-message-notification エンドポイント
"""

from .config import DispatcherConfig, get_dispatcher_config  # noqa: F401
from .schemas import DispatchResult, DispatchStatus, NotificationEvent  # noqa: F401
from .service import MessageNotificationService  # noqa: F401
