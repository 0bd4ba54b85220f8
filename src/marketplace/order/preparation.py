"""Warehouse stage: pick up a pending order and hand it to dispatch."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.access.guards import require_role
from marketplace.access.member import Member, Role
from marketplace.domain import marketplace
from marketplace.order.order import Order, OrderStatus
from marketplace.order.pickup import claim_next, claimed_order
from marketplace.queue.work_queue import DISPATCHED_ORDERS, PENDING_ORDERS, WorkQueue

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class AddOrderToPreparationStage:
    caller_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class MoveOrderToDeliverStage:
    caller_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class PreparationHandler:
    @handle(AddOrderToPreparationStage)
    def add_order_to_preparation_stage(self, command):
        worker = require_role(command.caller_id, Role.WAREHOUSE_WORKER)

        order, pending = claim_next(PENDING_ORDERS, OrderStatus.PENDING, "No valid order found in client queue")
        order_id = str(order.id)
        order.start_preparation(command.caller_id)
        worker.claim(order_id)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(WorkQueue).add(pending)
        current_domain.repository_for(Member).add(worker)

        logger.info("Order picked up for preparation", order_id=order_id, worker_id=command.caller_id)
        return order_id

    @handle(MoveOrderToDeliverStage)
    def move_order_to_deliver_stage(self, command):
        worker = require_role(command.caller_id, Role.WAREHOUSE_WORKER)

        order = claimed_order(worker)
        order_id = str(order.id)
        order.mark_prepared()

        queues = current_domain.repository_for(WorkQueue)
        dispatched = queues.get(DISPATCHED_ORDERS)
        dispatched.enqueue(order_id)

        current_domain.repository_for(Order).add(order)
        queues.add(dispatched)

        logger.info("Order prepared", order_id=order_id, worker_id=command.caller_id)
        return order_id
