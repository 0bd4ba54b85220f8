"""Escrow aggregate: funds held against a single order.

    HELD ──settle──► SETTLED

Only the price of the order is eligible for release; anything the client paid
above it is tracked as ``surplus`` and stays held. There is no refund
transition: canceled and disputed orders keep their escrow in HELD.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace
from marketplace.errors import AlreadySettled, OrderNotFound
from marketplace.escrow.events import FundsHeld, FundsReleased


class EscrowStatus(Enum):
    HELD = "Held"
    SETTLED = "Settled"


@marketplace.aggregate
class Escrow:
    order_id = Identifier(required=True, unique=True)
    client_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    surplus = Float(default=0.0, min_value=0.0)
    status = String(choices=EscrowStatus, default=EscrowStatus.HELD.value)
    beneficiary_id = Identifier()
    held_at = DateTime()
    settled_at = DateTime()
    transfer_id = String(max_length=100)

    @classmethod
    def hold(cls, order_id: str, client_id: str, amount: float, surplus: float = 0.0):
        if amount < 0 or surplus < 0:
            raise ValidationError({"amount": ["Escrowed amounts cannot be negative"]})

        now = datetime.now(UTC)
        escrow = cls(
            order_id=order_id,
            client_id=client_id,
            amount=amount,
            surplus=surplus,
            status=EscrowStatus.HELD.value,
            held_at=now,
        )
        escrow.raise_(
            FundsHeld(
                order_id=order_id,
                client_id=client_id,
                amount=amount,
                surplus=surplus,
                held_at=now,
            )
        )
        return escrow

    @property
    def is_settled(self) -> bool:
        return EscrowStatus(self.status) == EscrowStatus.SETTLED

    def settle(self, beneficiary_id: str) -> float:
        """Release the held amount to ``beneficiary_id`` and return it."""
        if self.is_settled:
            raise AlreadySettled(f"Escrow for order {self.order_id} was already settled")

        now = datetime.now(UTC)
        self.status = EscrowStatus.SETTLED.value
        self.beneficiary_id = beneficiary_id
        self.settled_at = now
        self.raise_(
            FundsReleased(
                order_id=str(self.order_id),
                beneficiary_id=beneficiary_id,
                amount=self.amount,
                released_at=now,
            )
        )
        return self.amount


@marketplace.repository(part_of=Escrow)
class EscrowRepository:
    def for_order(self, order_id) -> Escrow:
        """Fetch the escrow held against ``order_id``."""
        escrow = self._dao.query.filter(order_id=str(order_id)).all().first
        if escrow is None:
            raise OrderNotFound(str(order_id))
        return escrow
