"""Order creation: command and handler.

Creating an order prices it against the catalog, holds the payment in
escrow and places the order at the back of the pending queue.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from marketplace.access.guards import require_role
from marketplace.access.member import Role
from marketplace.domain import marketplace
from marketplace.errors import InsufficientPayment
from marketplace.escrow.escrow import Escrow
from marketplace.order.order import Order
from marketplace.queue.work_queue import PENDING_ORDERS, WorkQueue
from marketplace.storefront.storefront import Storefront

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CreateOrder:
    caller_id = Identifier(required=True)
    quantities = Text(required=True)  # JSON: list of quantities, index = catalog position
    payment = Float(required=True, min_value=0.0)


def _parse_quantities(raw) -> list[int]:
    quantities = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(quantities, list) or not all(isinstance(q, int) and not isinstance(q, bool) for q in quantities):
        raise ValidationError({"quantities": ["Quantities must be a list of integers"]})
    return quantities


@marketplace.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        require_role(command.caller_id, Role.CLIENT)

        storefront = current_domain.repository_for(Storefront).current()
        lines, total_price = storefront.quote(_parse_quantities(command.quantities))
        order = Order.create(client_id=command.caller_id, lines=lines, total_price=total_price)

        if command.payment < total_price:
            raise InsufficientPayment(f"Payment {command.payment} does not cover the order price {total_price}")

        order_id = str(order.id)
        escrow = Escrow.hold(
            order_id=order_id,
            client_id=command.caller_id,
            amount=total_price,
            surplus=command.payment - total_price,
        )

        queues = current_domain.repository_for(WorkQueue)
        pending = queues.get(PENDING_ORDERS)
        pending.enqueue(order_id)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Escrow).add(escrow)
        queues.add(pending)

        logger.info(
            "Order created",
            order_id=order_id,
            client_id=command.caller_id,
            total_price=total_price,
            items_quantity=order.items_quantity,
        )
        return order_id
