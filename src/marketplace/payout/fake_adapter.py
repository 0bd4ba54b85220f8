"""Configurable fake payout gateway for development and testing."""

from uuid import uuid4

from marketplace.payout.port import PayoutGateway, TransferResult


class FakePayoutGateway(PayoutGateway):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Transfer declined"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Transfer declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def transfer(self, beneficiary_id: str, amount: float, reference: str) -> TransferResult:
        self.calls.append(
            {
                "method": "transfer",
                "beneficiary_id": beneficiary_id,
                "amount": amount,
                "reference": reference,
            }
        )

        if self.should_succeed:
            return TransferResult(success=True, transfer_id=f"fake_po_{uuid4().hex[:12]}")
        return TransferResult(success=False, failure_reason=self.failure_reason)
