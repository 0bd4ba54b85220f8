"""Single serialization point for marketplace commands.

Every command is processed synchronously while holding one process-wide lock,
so no two operations interleave their reads and writes of queues, orders or
claims. Each command runs in its own unit of work: it either commits all of
its changes or none of them.
"""

import threading

from protean.utils.globals import current_domain

from marketplace.utils.logging import bind_caller, clear_context

_lock = threading.RLock()


def submit(command):
    """Process ``command`` and return the handler's result."""
    with _lock:
        bind_caller(getattr(command, "caller_id", None) or getattr(command, "owner_id", None))
        try:
            return current_domain.process(command, asynchronous=False)
        finally:
            clear_context()
