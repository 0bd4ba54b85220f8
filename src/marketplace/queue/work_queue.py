"""WorkQueue aggregate: FIFO hand-off of opaque identifiers between stages.

The queue knows nothing about what it holds. Consumers that need to skip
stale entries pass a validity predicate to ``dequeue_next_valid``; entries
that fail it are discarded at read time rather than excised when they become
invalid (lazy-skip dequeue).

    tail ──► enqueue appends here
    head ──► dequeue reads here
    size == tail - head
"""

from collections.abc import Callable

import structlog
from protean.fields import Integer, List, String

from marketplace.domain import marketplace
from marketplace.errors import QueueExhausted

logger = structlog.get_logger(__name__)

PENDING_ORDERS = "pending-orders"
DISPATCHED_ORDERS = "dispatched-orders"


@marketplace.aggregate
class WorkQueue:
    name = String(identifier=True, required=True, max_length=50)
    entries = List(content_type=String, default=list)
    head = Integer(default=0)
    tail = Integer(default=0)

    @classmethod
    def named(cls, name: str):
        return cls(name=name, entries=[], head=0, tail=0)

    def enqueue(self, entry: str) -> None:
        self.entries = [*(self.entries or []), str(entry)]
        self.tail = (self.tail or 0) + 1

    def dequeue(self) -> str:
        """Remove and return the entry at the head."""
        if not self.entries:
            raise QueueExhausted(f"Queue {self.name} is empty")
        entry, *remaining = self.entries
        self.entries = remaining
        self.head = (self.head or 0) + 1
        return entry

    def dequeue_next_valid(self, is_valid: Callable[[str], bool]) -> str:
        """Return the first entry accepted by ``is_valid``, discarding the rejects before it."""
        remaining = list(self.entries or [])
        consumed = 0
        discarded = []
        found = None
        while remaining:
            entry = remaining.pop(0)
            consumed += 1
            if is_valid(entry):
                found = entry
                break
            discarded.append(entry)

        if found is None:
            raise QueueExhausted(f"Queue {self.name} has no valid entry")

        self.entries = remaining
        self.head = (self.head or 0) + consumed
        if discarded:
            logger.info("Discarded invalid queue entries", queue=self.name, discarded=discarded)
        return found

    def size(self) -> int:
        return (self.tail or 0) - (self.head or 0)

    def contains(self, entry: str) -> bool:
        return str(entry) in (self.entries or [])

