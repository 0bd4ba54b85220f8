"""Client receipt: confirm a delivered order or flag a discrepancy."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.access.guards import require_order_owner, require_role
from marketplace.access.member import Role
from marketplace.domain import marketplace
from marketplace.escrow.settlement import settle_order_escrow
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class VerifyOrder:
    caller_id = Identifier(required=True)
    order_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class MarkOrderAsReceivedWithDiscrepancy:
    caller_id = Identifier(required=True)
    order_id = Identifier(required=True)
    verification = String(required=True, max_length=50)
    observations = Text()


@marketplace.command_handler(part_of=Order)
class VerificationHandler:
    @handle(VerifyOrder)
    def verify_order(self, command):
        require_role(command.caller_id, Role.CLIENT)

        repo = current_domain.repository_for(Order)
        order = repo.load(command.order_id)
        require_order_owner(command.caller_id, order)

        order.verify()
        amount = settle_order_escrow(str(order.id))
        repo.add(order)

        logger.info("Order verified", order_id=command.order_id, client_id=command.caller_id, settled=amount)
        return amount

    @handle(MarkOrderAsReceivedWithDiscrepancy)
    def mark_order_as_received_with_discrepancy(self, command):
        require_role(command.caller_id, Role.CLIENT)

        repo = current_domain.repository_for(Order)
        order = repo.load(command.order_id)
        require_order_owner(command.caller_id, order)

        order.report_discrepancy(command.verification, command.observations)
        repo.add(order)

        logger.info(
            "Order received with discrepancy",
            order_id=command.order_id,
            client_id=command.caller_id,
            verification=order.verification,
        )
