"""Fake notifier — records dispatched notifications for test assertions."""

from uuid import uuid4

from backoffice.notifications.port import NotificationPort


class FakeNotifier(NotificationPort):
    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify(self, topic: str, record_id: str, payload: dict) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"ntf-{uuid4().hex[:12]}"
        self.sent.append({"message_id": message_id, "topic": topic, "record_id": record_id, "payload": payload})
        return {"message_id": message_id, "status": "sent"}

    def topics_for(self, record_id: str) -> list[str]:
        return [n["topic"] for n in self.sent if n["record_id"] == record_id]

    def reset(self):
        self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
