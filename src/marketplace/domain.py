"""Marketplace bounded context: Escrowed Order Fulfillment.

Handles the order lifecycle from client purchase through warehouse
preparation, dispatch and delivery, up to client confirmation. Payment is held
in escrow from order creation until the client verifies receipt. Uses CQRS
because the workflow is linear and every transition is a single command.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
