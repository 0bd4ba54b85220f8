"""Marketplace domain errors.

Every rejection in the workflow is a Protean ``ValidationError`` carrying a
field-keyed message dict, so callers that only know Protean still see a
validation failure. The subclasses let callers (and the API layer) tell the
kinds apart.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class MarketplaceError(ValidationError):
    """Base class for marketplace rule violations."""

    field = "marketplace"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__({self.field: [message]})

    def __str__(self) -> str:
        return self.message


class Unauthorized(MarketplaceError):
    """The caller does not hold the role the operation requires."""

    field = "caller_id"


class Forbidden(MarketplaceError):
    """The caller holds the role but is not the order's owner or assignee."""

    field = "caller_id"


class InvalidState(MarketplaceError):
    """The order is not in a state that permits the transition."""

    field = "status"


class NoActiveClaim(InvalidState):
    """The worker has no claimed order to act on."""

    field = "claim"


class QueueExhausted(MarketplaceError):
    """The queue ran out of entries before a usable one was found."""

    field = "queue"


class NoValidOrder(MarketplaceError):
    """No order in the stage queue is still eligible for pickup."""

    field = "queue"


class InsufficientPayment(MarketplaceError):
    field = "payment"


class EmptyOrder(MarketplaceError):
    field = "quantities"


class InvalidSKU(MarketplaceError):
    field = "sku"


class InvalidVerificationCode(MarketplaceError):
    field = "verification"


class AlreadyRegistered(MarketplaceError):
    field = "identity"


class AlreadySettled(MarketplaceError):
    field = "escrow"


class SettlementFailed(MarketplaceError):
    field = "escrow"


class StorefrontNotOpen(MarketplaceError):
    field = "storefront"


class StorefrontAlreadyOpen(MarketplaceError):
    field = "storefront"


class OrderNotFound(ObjectNotFoundError):
    """No order was ever created under the given identifier."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        self.message = f"Order {order_id} does not exist"
        super().__init__({"order_id": [self.message]})

    def __str__(self) -> str:
        return self.message
