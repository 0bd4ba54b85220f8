"""Storefront domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Storefront")
class StorefrontOpened:
    """The storefront was initialized with its catalog and owner."""

    __version__ = 1

    storefront_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    skus = Text(required=True)  # JSON list of SKU strings, index = position
    sku_count = Integer(required=True)
    opened_at = DateTime(required=True)


@marketplace.event(part_of="Storefront")
class OperatorCredited:
    """Settled escrow funds were credited to the operator."""

    __version__ = 1

    storefront_id = Identifier(required=True)
    operator_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Float(required=True)
    settled_balance = Float(required=True)
    credited_at = DateTime(required=True)
