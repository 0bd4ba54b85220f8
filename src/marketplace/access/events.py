"""Access control domain events."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Member")
class MemberRegistered:
    """The registry owner granted a role to an identity."""

    __version__ = 1

    identity = Identifier(required=True)
    role = String(required=True)
    label = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Member")
class OrderClaimed:
    """A worker took an order off a stage queue."""

    __version__ = 1

    identity = Identifier(required=True)
    role = String(required=True)
    order_id = Identifier(required=True)
    claimed_at = DateTime(required=True)
