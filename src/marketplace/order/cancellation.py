"""Order cancellation: command and handler.

The canceled order keeps its slot in the pending queue; the next warehouse
pickup skips it.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.access.guards import require_order_owner, require_role
from marketplace.access.member import Role
from marketplace.domain import marketplace
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CancelOrder:
    caller_id = Identifier(required=True)
    order_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        require_role(command.caller_id, Role.CLIENT)

        repo = current_domain.repository_for(Order)
        order = repo.load(command.order_id)
        require_order_owner(command.caller_id, order)

        order.cancel()
        repo.add(order)
        logger.info("Order canceled", order_id=command.order_id, client_id=command.caller_id)
