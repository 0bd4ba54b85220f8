"""Payout gateway port.

Settlement moves released escrow funds to the operator's account. Adapters
implement ``transfer``; domain code only sees ``TransferResult``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TransferResult:
    """Result of a payout transfer attempt."""

    success: bool
    transfer_id: str | None = None
    failure_reason: str | None = None


class PayoutGateway(ABC):
    """Abstract payout gateway interface."""

    @abstractmethod
    def transfer(self, beneficiary_id: str, amount: float, reference: str) -> TransferResult:
        """Send ``amount`` to ``beneficiary_id``, tagged with ``reference``."""
        ...
