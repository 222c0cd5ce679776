# backend/tests/test_push_router.py

from fastapi.testclient import TestClient

from message_push.main import create_app
from message_push.push.router import get_user_push_service
from message_push.push.schemas import PushMessage, UserPushResult


class DummyUserPushService:
    def __init__(self) -> None:
        self.calls = []

    def send_to_user(self, user_id: str, message: PushMessage) -> UserPushResult:
        self.calls.append((user_id, message))
        return UserPushResult(success=True, sent=2)


def test_push_to_user_returns_result():
    app = create_app()
    dummy = DummyUserPushService()
    app.dependency_overrides[get_user_push_service] = lambda: dummy
    client = TestClient(app)

    resp = client.post("/push/users/u1", json={"title": "Hello", "body": "World"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "sent": 2}
    user_id, message = dummy.calls[0]
    assert user_id == "u1"
    assert message.priority.value == "high"


def test_push_to_user_rejects_invalid_priority():
    app = create_app()
    app.dependency_overrides[get_user_push_service] = DummyUserPushService
    client = TestClient(app)

    resp = client.post(
        "/push/users/u1",
        json={"title": "Hello", "body": "World", "priority": "urgent"},
    )

    assert resp.status_code == 422


def test_push_to_user_500_on_unexpected_error():
    class BrokenService:
        def send_to_user(self, user_id, message):
            raise RuntimeError("boom")

    app = create_app()
    app.dependency_overrides[get_user_push_service] = BrokenService
    client = TestClient(app)

    resp = client.post("/push/users/u1", json={"title": "Hello", "body": "World"})

    assert resp.status_code >= 500
