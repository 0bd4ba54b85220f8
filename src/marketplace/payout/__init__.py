"""Payout gateway factory.

get_gateway() / set_gateway() swap the adapter used at settlement time.
Defaults to FakePayoutGateway.
"""

from marketplace.payout.fake_adapter import FakePayoutGateway
from marketplace.payout.port import PayoutGateway

_current_gateway: PayoutGateway | None = None


def get_gateway() -> PayoutGateway:
    """Return the current payout gateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakePayoutGateway()
    return _current_gateway


def set_gateway(gateway: PayoutGateway) -> None:
    """Override the active payout gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
