"""Forwards the client-facing order notices to the active notifier."""

import structlog
from protean import handle

from marketplace.domain import marketplace
from marketplace.notifier import get_notifier
from marketplace.order.events import OrderCreated, OrderDelivered
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Order)
class OrderNotificationHandler:
    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        get_notifier().notify(
            str(event.client_id),
            "OrderCreated",
            {"order_id": str(event.order_id), "total_price": event.total_price},
        )
        logger.info("OrderCreated notice sent", order_id=str(event.order_id), client_id=str(event.client_id))

    @handle(OrderDelivered)
    def on_order_delivered(self, event: OrderDelivered) -> None:
        get_notifier().notify(
            str(event.client_id),
            "OrderDeliver",
            {"order_id": str(event.order_id), "dispatcher_id": str(event.dispatcher_id)},
        )
        logger.info("OrderDeliver notice sent", order_id=str(event.order_id), client_id=str(event.client_id))
