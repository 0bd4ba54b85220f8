"""Role and ownership checks run at the entry of every workflow command."""

from protean.utils.globals import current_domain

from marketplace.access.member import Member, Role
from marketplace.errors import Forbidden, Unauthorized

_ROLE_NAMES = {
    Role.CLIENT: "client",
    Role.WAREHOUSE_WORKER: "warehouse worker",
    Role.DISPATCHER_WORKER: "dispatcher worker",
}


def require_role(caller_id: str, role: Role) -> Member:
    """Return the caller's member record, failing unless it holds ``role``."""
    member = current_domain.repository_for(Member).find(caller_id)
    if member is None or not member.holds(role):
        raise Unauthorized(f"Caller {caller_id} is not a registered {_ROLE_NAMES[role]}")
    return member


def require_order_owner(caller_id: str, order) -> None:
    if str(order.client_id) != str(caller_id):
        raise Forbidden(f"Caller {caller_id} does not own order {order.id}")
