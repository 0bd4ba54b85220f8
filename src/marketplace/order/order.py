"""Order aggregate: the fulfillment state machine.

State Machine:
    PENDING → IN_PREPARATION → PREPARED → IN_TRANSIT → DELIVERED → VERIFIED
    PENDING → CANCELED

A delivered order may instead be flagged with a discrepancy code. Its status
stays DELIVERED and it is never verified afterwards.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.errors import EmptyOrder, InvalidState, InvalidVerificationCode, OrderNotFound
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


class OrderStatus(Enum):
    PENDING = "Pending"
    CANCELED = "Canceled"
    IN_PREPARATION = "In_Preparation"
    PREPARED = "Prepared"
    IN_TRANSIT = "In_Transit"
    DELIVERED = "Delivered"
    VERIFIED = "Verified"


class OrderVerification(Enum):
    NOT_VERIFIED = "Not_Verified"
    ERROR_IN_ORDER = "Error_In_Order"
    PACKAGING_PROBLEMS = "Packaging_Problems"
    DAMAGED_PRODUCT = "Damaged_Product"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.IN_PREPARATION, OrderStatus.CANCELED},
    OrderStatus.IN_PREPARATION: {OrderStatus.PREPARED},
    OrderStatus.PREPARED: {OrderStatus.IN_TRANSIT},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.VERIFIED},
    OrderStatus.VERIFIED: set(),  # Terminal
    OrderStatus.CANCELED: set(),  # Terminal
}


def parse_verification(code: str) -> OrderVerification:
    """Accept a verification code by value ("Error_In_Order") or name ("ERROR_IN_ORDER")."""
    for verification in OrderVerification:
        if code in (verification.value, verification.name):
            return verification
    raise InvalidVerificationCode(f"Unknown verification code {code!r}")


@marketplace.entity(part_of="Order")
class LineItem:
    """A catalog SKU and the quantity ordered, priced at creation time."""

    position = Integer(required=True, min_value=0)
    sku = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@marketplace.aggregate
class Order:
    client_id = Identifier(required=True)
    items = HasMany(LineItem)
    items_quantity = Integer(default=0)
    total_price = Float(default=0.0, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    verification = String(choices=OrderVerification, default=OrderVerification.NOT_VERIFIED.value)
    observations = Text()
    prepared_by = Identifier()
    delivered_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discrepancies_are_only_recorded_on_delivered_orders(self):
        if (
            self.verification != OrderVerification.NOT_VERIFIED.value
            and self.status != OrderStatus.DELIVERED.value
        ):
            raise ValidationError({"verification": ["Only delivered orders can carry a discrepancy code"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, client_id, lines, total_price):
        """Create a pending order from priced line items.

        Args:
            client_id: The client placing the order.
            lines: List of dicts with position, sku, quantity, unit_price.
            total_price: Catalog price of the whole order.
        """
        lines = [line for line in lines if line["quantity"] > 0]
        if not lines:
            raise EmptyOrder("An order needs at least one SKU with a positive quantity")

        now = datetime.now(UTC)
        order = cls(
            client_id=client_id,
            items_quantity=sum(line["quantity"] for line in lines),
            total_price=total_price,
            status=OrderStatus.PENDING.value,
            verification=OrderVerification.NOT_VERIFIED.value,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(LineItem(**line))

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                client_id=str(client_id),
                items=json.dumps(lines),
                items_quantity=order.items_quantity,
                total_price=total_price,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_items(self) -> list[LineItem]:
        return sorted(self.items or [], key=lambda item: item.position)

    def products(self) -> list[tuple[str, int]]:
        """(sku, quantity) pairs in catalog order."""
        return [(item.sku, item.quantity) for item in self.line_items()]

    def has_status(self, status: OrderStatus) -> bool:
        return OrderStatus(self.status) == status

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState(f"Order {self.id} cannot move from {current.value} to {target_status.value}")

    def _assert_not_flagged(self):
        if OrderVerification(self.verification) != OrderVerification.NOT_VERIFIED:
            raise InvalidState(f"Order {self.id} was already received with discrepancy {self.verification}")

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def cancel(self):
        self._assert_can_transition(OrderStatus.CANCELED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELED.value
        self.updated_at = now
        self.raise_(OrderCanceled(order_id=str(self.id), client_id=str(self.client_id), canceled_at=now))

    def start_preparation(self, worker_id):
        self._assert_can_transition(OrderStatus.IN_PREPARATION)
        now = datetime.now(UTC)
        self.status = OrderStatus.IN_PREPARATION.value
        self.prepared_by = worker_id
        self.updated_at = now
        self.raise_(OrderPreparationStarted(order_id=str(self.id), worker_id=str(worker_id), started_at=now))

    def mark_prepared(self):
        self._assert_can_transition(OrderStatus.PREPARED)
        now = datetime.now(UTC)
        self.status = OrderStatus.PREPARED.value
        self.updated_at = now
        self.raise_(OrderPrepared(order_id=str(self.id), worker_id=str(self.prepared_by), prepared_at=now))

    def dispatch(self, dispatcher_id):
        self._assert_can_transition(OrderStatus.IN_TRANSIT)
        now = datetime.now(UTC)
        self.status = OrderStatus.IN_TRANSIT.value
        self.delivered_by = dispatcher_id
        self.updated_at = now
        self.raise_(OrderDispatched(order_id=str(self.id), dispatcher_id=str(dispatcher_id), dispatched_at=now))

    def deliver(self):
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now
        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                client_id=str(self.client_id),
                dispatcher_id=str(self.delivered_by),
                delivered_at=now,
            )
        )

    def verify(self):
        """Confirm receipt. The caller settles the escrow."""
        self._assert_can_transition(OrderStatus.VERIFIED)
        self._assert_not_flagged()
        now = datetime.now(UTC)
        self.status = OrderStatus.VERIFIED.value
        self.updated_at = now
        self.raise_(
            OrderVerified(
                order_id=str(self.id),
                client_id=str(self.client_id),
                total_price=self.total_price,
                verified_at=now,
            )
        )

    def report_discrepancy(self, code, observations=None):
        """Flag a delivered order. Status stays DELIVERED and funds stay held."""
        verification = code if isinstance(code, OrderVerification) else parse_verification(code)
        if verification == OrderVerification.NOT_VERIFIED:
            raise InvalidVerificationCode("A discrepancy needs a code other than Not_Verified")
        if not self.has_status(OrderStatus.DELIVERED):
            raise InvalidState(f"Order {self.id} is {self.status}, only delivered orders can be disputed")
        self._assert_not_flagged()

        now = datetime.now(UTC)
        self.verification = verification.value
        if observations:
            self.observations = observations
        self.updated_at = now
        self.raise_(
            OrderDiscrepancyReported(
                order_id=str(self.id),
                client_id=str(self.client_id),
                verification=verification.value,
                observations=observations or "",
                reported_at=now,
            )
        )


@marketplace.repository(part_of=Order)
class OrderRepository:
    def load(self, order_id) -> Order:
        """Fetch an order, failing with ``OrderNotFound`` for ids never created."""
        try:
            return self.get(order_id)
        except ObjectNotFoundError as exc:
            raise OrderNotFound(str(order_id)) from exc
