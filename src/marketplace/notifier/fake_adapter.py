"""In-memory notifier that records every notice it is asked to send."""

from marketplace.notifier.port import Notifier


class FakeNotifier(Notifier):
    def __init__(self) -> None:
        self.sent: list[dict] = []

    def notify(self, recipient_id: str, kind: str, payload: dict) -> None:
        self.sent.append({"recipient_id": recipient_id, "kind": kind, "payload": dict(payload)})

    def sent_to(self, recipient_id: str) -> list[dict]:
        return [notice for notice in self.sent if notice["recipient_id"] == recipient_id]
