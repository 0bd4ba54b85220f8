"""Escrow domain events."""

from protean.fields import DateTime, Float, Identifier

from marketplace.domain import marketplace


@marketplace.event(part_of="Escrow")
class FundsHeld:
    """A client's payment was placed in escrow against an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    amount = Float(required=True)
    surplus = Float(required=True)
    held_at = DateTime(required=True)


@marketplace.event(part_of="Escrow")
class FundsReleased:
    """Escrowed funds were released to the operator after verification."""

    __version__ = 1

    order_id = Identifier(required=True)
    beneficiary_id = Identifier(required=True)
    amount = Float(required=True)
    released_at = DateTime(required=True)
