"""Read surface for observers: orders, claims, queues, roles and balances.

None of these functions change state.
"""

from protean.utils.globals import current_domain

from marketplace.access.member import Member, Role
from marketplace.escrow.escrow import Escrow
from marketplace.order.order import Order
from marketplace.projections.order_timeline import OrderTimeline
from marketplace.queue.work_queue import WorkQueue
from marketplace.storefront.storefront import Storefront


def get_order(order_id: str) -> Order:
    return current_domain.repository_for(Order).load(order_id)


def products_for_order(order_id: str) -> list[tuple[str, int]]:
    """The (sku, quantity) pairs of an order."""
    return get_order(order_id).products()


def _claim_of(identity: str, role: Role) -> str | None:
    member = current_domain.repository_for(Member).find(identity)
    if member is None or not member.holds(role):
        return None
    return str(member.claimed_order_id) if member.claimed_order_id else None


def warehouse_claim(identity: str) -> str | None:
    """The order a warehouse worker last claimed, or None."""
    return _claim_of(identity, Role.WAREHOUSE_WORKER)


def dispatcher_claim(identity: str) -> str | None:
    """The order a dispatcher last claimed, or None."""
    return _claim_of(identity, Role.DISPATCHER_WORKER)


def queue_size(name: str) -> int:
    return current_domain.repository_for(WorkQueue).get(name).size()


def queue_contains(name: str, order_id: str) -> bool:
    """Whether ``order_id`` is still physically queued, valid or not."""
    return current_domain.repository_for(WorkQueue).get(name).contains(order_id)


def role_of(identity: str) -> Role | None:
    return current_domain.repository_for(Member).role_of(identity)


def settled_balance() -> float:
    return current_domain.repository_for(Storefront).current().settled_balance or 0.0


def escrow_for(order_id: str) -> Escrow:
    return current_domain.repository_for(Escrow).for_order(order_id)


def timeline_for(order_id: str) -> list[OrderTimeline]:
    get_order(order_id)
    entries = current_domain.repository_for(OrderTimeline)._dao.query.filter(order_id=order_id).all().items
    return sorted(entries, key=lambda entry: entry.occurred_at)
