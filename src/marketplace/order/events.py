"""Domain events for the Order aggregate.

``OrderCreated`` and ``OrderDelivered`` are the two notifications external
subscribers rely on; each is raised exactly once, by the transition that
produces it. The rest feed the order timeline.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderCreated:
    """A client placed a paid order."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {position, sku, quantity, unit_price}
    items_quantity = Integer(required=True)
    total_price = Float(required=True)
    created_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCanceled:
    """The client canceled the order before a warehouse worker picked it up."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    canceled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderPreparationStarted:
    __version__ = 1

    order_id = Identifier(required=True)
    worker_id = Identifier(required=True)
    started_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderPrepared:
    __version__ = 1

    order_id = Identifier(required=True)
    worker_id = Identifier(required=True)
    prepared_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDispatched:
    __version__ = 1

    order_id = Identifier(required=True)
    dispatcher_id = Identifier(required=True)
    dispatched_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDelivered:
    """The dispatcher handed the order to the client."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    dispatcher_id = Identifier(required=True)
    delivered_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderVerified:
    """The client confirmed receipt; escrowed funds become payable."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    total_price = Float(required=True)
    verified_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDiscrepancyReported:
    """The client received the order but flagged a problem with it."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    verification = String(required=True)
    observations = Text()
    reported_at = DateTime(required=True)
