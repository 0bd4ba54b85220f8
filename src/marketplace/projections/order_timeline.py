"""Order timeline: append-only audit trail of all order events."""

import json
import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import (
    OrderCanceled,
    OrderCreated,
    OrderDelivered,
    OrderDiscrepancyReported,
    OrderDispatched,
    OrderPreparationStarted,
    OrderPrepared,
    OrderVerified,
)
from marketplace.order.order import Order


@marketplace.projection
class OrderTimeline:
    entry_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    event_type = String(required=True)
    description = String(required=True)
    occurred_at = DateTime(required=True)
    event_metadata = Text()  # JSON: extra event data


def _add_entry(order_id, event_type, description, occurred_at, event_metadata=None):
    current_domain.repository_for(OrderTimeline).add(
        OrderTimeline(
            entry_id=str(uuid.uuid4()),
            order_id=order_id,
            event_type=event_type,
            description=description,
            occurred_at=occurred_at,
            event_metadata=json.dumps(event_metadata) if event_metadata else None,
        )
    )


@marketplace.projector(projector_for=OrderTimeline, aggregates=[Order])
class OrderTimelineProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        _add_entry(
            event.order_id,
            "OrderCreated",
            f"Order placed for {event.items_quantity} units",
            event.created_at,
            {"client_id": str(event.client_id), "total_price": event.total_price},
        )

    @on(OrderCanceled)
    def on_order_canceled(self, event):
        _add_entry(event.order_id, "OrderCanceled", "Order was canceled by the client", event.canceled_at)

    @on(OrderPreparationStarted)
    def on_preparation_started(self, event):
        _add_entry(
            event.order_id,
            "OrderPreparationStarted",
            f"Picked up by warehouse worker {event.worker_id}",
            event.started_at,
        )

    @on(OrderPrepared)
    def on_order_prepared(self, event):
        _add_entry(event.order_id, "OrderPrepared", "Order is ready for dispatch", event.prepared_at)

    @on(OrderDispatched)
    def on_order_dispatched(self, event):
        _add_entry(
            event.order_id,
            "OrderDispatched",
            f"Picked up by dispatcher {event.dispatcher_id}",
            event.dispatched_at,
        )

    @on(OrderDelivered)
    def on_order_delivered(self, event):
        _add_entry(event.order_id, "OrderDelivered", "Order was delivered", event.delivered_at)

    @on(OrderVerified)
    def on_order_verified(self, event):
        _add_entry(
            event.order_id,
            "OrderVerified",
            f"Receipt confirmed, {event.total_price} released from escrow",
            event.verified_at,
        )

    @on(OrderDiscrepancyReported)
    def on_discrepancy_reported(self, event):
        _add_entry(
            event.order_id,
            "OrderDiscrepancyReported",
            f"Received with discrepancy: {event.verification}",
            event.reported_at,
            {"observations": event.observations} if event.observations else None,
        )
