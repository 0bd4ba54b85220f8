"""Escrow settlement: release a verified order's funds to the operator.

Runs inside the command that verifies the order, so a declined payout rejects
the verification as a whole and nothing is persisted.
"""

import structlog
from protean.utils.globals import current_domain

from marketplace.errors import SettlementFailed
from marketplace.escrow.escrow import Escrow
from marketplace.payout import get_gateway
from marketplace.storefront.storefront import Storefront

logger = structlog.get_logger(__name__)


def settle_order_escrow(order_id: str) -> float:
    """Settle the escrow held for ``order_id`` and return the amount released."""
    storefront_repo = current_domain.repository_for(Storefront)
    escrow_repo = current_domain.repository_for(Escrow)

    storefront = storefront_repo.current()
    escrow = escrow_repo.for_order(order_id)
    beneficiary_id = str(storefront.operator_id)

    amount = escrow.settle(beneficiary_id)
    storefront.credit_operator(order_id, amount)

    result = get_gateway().transfer(beneficiary_id=beneficiary_id, amount=amount, reference=f"order-{order_id}")
    if not result.success:
        logger.warning(
            "Payout transfer declined",
            order_id=order_id,
            beneficiary_id=beneficiary_id,
            amount=amount,
            reason=result.failure_reason,
        )
        raise SettlementFailed(f"Payout for order {order_id} was declined: {result.failure_reason}")

    escrow.transfer_id = result.transfer_id
    escrow_repo.add(escrow)
    storefront_repo.add(storefront)

    logger.info(
        "Escrow settled",
        order_id=order_id,
        beneficiary_id=beneficiary_id,
        amount=amount,
        transfer_id=result.transfer_id,
    )
    return amount
