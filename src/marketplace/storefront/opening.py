"""Storefront opening: command and handler.

Opening fixes the catalog, names the registry owner and creates the two stage
queues. A deployment opens its storefront once.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import StorefrontAlreadyOpen
from marketplace.queue.work_queue import DISPATCHED_ORDERS, PENDING_ORDERS, WorkQueue
from marketplace.storefront.storefront import Storefront

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Storefront")
class OpenStorefront:
    owner_id = Identifier(required=True)
    skus = Text(required=True)  # JSON: list of SKU strings
    unit_prices = Text(required=True)  # JSON: list of floats, one per SKU
    operator_id = Identifier()


@marketplace.command_handler(part_of=Storefront)
class OpenStorefrontHandler:
    @handle(OpenStorefront)
    def open_storefront(self, command):
        repo = current_domain.repository_for(Storefront)
        if repo.is_open():
            raise StorefrontAlreadyOpen("The storefront is already open")

        skus = json.loads(command.skus) if isinstance(command.skus, str) else command.skus
        unit_prices = json.loads(command.unit_prices) if isinstance(command.unit_prices, str) else command.unit_prices

        storefront = Storefront.open(
            owner_id=command.owner_id,
            skus=skus,
            unit_prices=unit_prices,
            operator_id=command.operator_id,
        )
        repo.add(storefront)

        queues = current_domain.repository_for(WorkQueue)
        queues.add(WorkQueue.named(PENDING_ORDERS))
        queues.add(WorkQueue.named(DISPATCHED_ORDERS))

        logger.info("Storefront opened", storefront_id=str(storefront.id), owner_id=command.owner_id, skus=skus)
        return str(storefront.id)
