"""Dispatch stage: pick up a prepared order and deliver it."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.access.guards import require_role
from marketplace.access.member import Member, Role
from marketplace.domain import marketplace
from marketplace.order.order import Order, OrderStatus
from marketplace.order.pickup import claim_next, claimed_order
from marketplace.queue.work_queue import DISPATCHED_ORDERS, WorkQueue

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class DispatchOrder:
    caller_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class DeliverOrder:
    caller_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class DispatchHandler:
    @handle(DispatchOrder)
    def dispatch_order(self, command):
        dispatcher = require_role(command.caller_id, Role.DISPATCHER_WORKER)

        order, queue = claim_next(DISPATCHED_ORDERS, OrderStatus.PREPARED, "No valid order found in dispatch queue")
        order_id = str(order.id)
        order.dispatch(command.caller_id)
        dispatcher.claim(order_id)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(WorkQueue).add(queue)
        current_domain.repository_for(Member).add(dispatcher)

        logger.info("Order dispatched", order_id=order_id, dispatcher_id=command.caller_id)
        return order_id

    @handle(DeliverOrder)
    def deliver_order(self, command):
        dispatcher = require_role(command.caller_id, Role.DISPATCHER_WORKER)

        order = claimed_order(dispatcher)
        order.deliver()
        current_domain.repository_for(Order).add(order)

        logger.info("Order delivered", order_id=str(order.id), dispatcher_id=command.caller_id)
        return str(order.id)
