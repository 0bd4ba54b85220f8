import json

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from marketplace.access.registration import RegisterClient, RegisterDispatcherWorker, RegisterWarehouseWorker
from marketplace.notifier import reset_notifier
from marketplace.order.creation import CreateOrder
from marketplace.order.dispatch import DeliverOrder, DispatchOrder
from marketplace.order.preparation import AddOrderToPreparationStage, MoveOrderToDeliverStage
from marketplace.payout import reset_gateway
from marketplace.storefront.opening import OpenStorefront

SKUS = ["01500", "02500", "03150", "04100", "05100"]
UNIT_PRICES = [0.05, 0.08, 0.1, 0.12, 0.2]
OWNER = "owner-001"
OPERATOR = "operator-001"


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        for _, broker in current_domain.brokers.items():
            broker._data_reset()
        current_domain.event_store.store._data_reset()
    reset_gateway()
    reset_notifier()


@pytest.fixture()
def storefront_id():
    """An open storefront with the standard five-SKU catalog."""
    return current_domain.process(
        OpenStorefront(
            owner_id=OWNER,
            skus=json.dumps(SKUS),
            unit_prices=json.dumps(UNIT_PRICES),
            operator_id=OPERATOR,
        ),
        asynchronous=False,
    )


@pytest.fixture()
def members(storefront_id):
    """One client, two warehouse workers and two dispatchers."""
    roster = {
        "client": ("client-001", RegisterClient),
        "other_client": ("client-002", RegisterClient),
        "warehouser": ("warehouse-001", RegisterWarehouseWorker),
        "other_warehouser": ("warehouse-002", RegisterWarehouseWorker),
        "dispatcher": ("dispatcher-001", RegisterDispatcherWorker),
        "other_dispatcher": ("dispatcher-002", RegisterDispatcherWorker),
    }
    for key, (identity, command_class) in roster.items():
        current_domain.process(
            command_class(caller_id=OWNER, identity=identity, label=key.replace("_", " ").title()),
            asynchronous=False,
        )
    return {key: identity for key, (identity, _) in roster.items()}


@pytest.fixture()
def place_order(members):
    """Factory: place an order as the client and return its id."""

    def _place(quantities=(3, 5, 0, 3, 0), payment=1.0, client=None):
        return current_domain.process(
            CreateOrder(
                caller_id=client or members["client"],
                quantities=json.dumps(list(quantities)),
                payment=payment,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def delivered_order(members, place_order):
    """An order walked through preparation and dispatch up to delivery."""
    order_id = place_order()
    for command in (
        AddOrderToPreparationStage(caller_id=members["warehouser"]),
        MoveOrderToDeliverStage(caller_id=members["warehouser"]),
        DispatchOrder(caller_id=members["dispatcher"]),
        DeliverOrder(caller_id=members["dispatcher"]),
    ):
        current_domain.process(command, asynchronous=False)
    return order_id
