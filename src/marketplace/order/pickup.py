"""Stage pickup shared by warehouse and dispatcher workers.

A worker takes the oldest order in a stage queue whose status still matches
that stage. Entries that no longer match (a canceled order in the pending
queue) are discarded on the way. If no entry matches, the pickup fails and
the queue is left exactly as it was.
"""

from protean.utils.globals import current_domain

from marketplace.access.member import Member
from marketplace.errors import NoActiveClaim, NoValidOrder, QueueExhausted
from marketplace.order.order import Order, OrderStatus
from marketplace.queue.work_queue import WorkQueue


def claim_next(queue_name: str, stage_status: OrderStatus, no_order_message: str) -> tuple[Order, WorkQueue]:
    """Dequeue the next order still in ``stage_status``.

    Returns the order and the advanced queue. The caller persists both.
    """
    orders = current_domain.repository_for(Order)
    queue = current_domain.repository_for(WorkQueue).get(queue_name)

    def still_in_stage(order_id: str) -> bool:
        return orders.load(order_id).has_status(stage_status)

    try:
        order_id = queue.dequeue_next_valid(still_in_stage)
    except QueueExhausted as exc:
        raise NoValidOrder(no_order_message) from exc
    return orders.load(order_id), queue


def claimed_order(worker: Member) -> Order:
    """The order the worker last claimed."""
    if not worker.claimed_order_id:
        raise NoActiveClaim(f"{worker.role} {worker.identity} has no claimed order")
    return current_domain.repository_for(Order).load(worker.claimed_order_id)
