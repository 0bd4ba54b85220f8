"""Notifier port: delivers client-facing order notices."""

from abc import ABC, abstractmethod


class Notifier(ABC):
    @abstractmethod
    def notify(self, recipient_id: str, kind: str, payload: dict) -> None:
        """Deliver a notice of ``kind`` to ``recipient_id``."""
        ...
