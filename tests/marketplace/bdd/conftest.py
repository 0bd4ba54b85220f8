"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

from marketplace import errors
from marketplace.access.registration import RegisterClient, RegisterDispatcherWorker, RegisterWarehouseWorker
from marketplace.order.creation import CreateOrder
from marketplace.order.lookup import escrow_for, get_order, queue_size, role_of, settled_balance
from marketplace.queue.work_queue import PENDING_ORDERS
from marketplace.storefront.opening import OpenStorefront

OWNER = "owner-001"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def context():
    """The order the scenario is following."""
    return {"order_id": None}


def _quantities(raw):
    return [int(part) for part in raw.split(",")]


def _place(client, quantities, payment):
    return current_domain.process(
        CreateOrder(caller_id=client, quantities=json.dumps(_quantities(quantities)), payment=payment),
        asynchronous=False,
    )


def _register(command_class, identity):
    current_domain.process(command_class(caller_id=OWNER, identity=identity, label=identity), asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an open storefront with the standard catalog")
def open_storefront():
    current_domain.process(
        OpenStorefront(
            owner_id=OWNER,
            skus=json.dumps(["01500", "02500", "03150", "04100", "05100"]),
            unit_prices=json.dumps([0.05, 0.08, 0.1, 0.12, 0.2]),
            operator_id="operator-001",
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('a registered client "{identity}"'))
def registered_client(identity):
    _register(RegisterClient, identity)


@given(parsers.cfparse('a registered warehouse worker "{identity}"'))
def registered_warehouse_worker(identity):
    _register(RegisterWarehouseWorker, identity)


@given(parsers.cfparse('a registered dispatcher "{identity}"'))
def registered_dispatcher(identity):
    _register(RegisterDispatcherWorker, identity)


@given(parsers.cfparse('"{client}" placed an order for quantities "{quantities}" paying {payment:f}'))
def placed_order(client, quantities, payment, context):
    context["order_id"] = _place(client, quantities, payment)


# ---------------------------------------------------------------------------
# When steps (shared)
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{client}" places an order for quantities "{quantities}" paying {payment:f}'))
def places_order(client, quantities, payment, context, error):
    try:
        context["order_id"] = _place(client, quantities, payment)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the action fails with "{message}"'))
def action_fails_with_message(error, message):
    assert error["exc"] is not None, "Expected an error but none was raised"
    assert str(error["exc"]) == message


@then(parsers.cfparse("the action fails with an {kind} error"))
def action_fails_with_kind(error, kind):
    assert error["exc"] is not None, "Expected an error but none was raised"
    assert isinstance(error["exc"], getattr(errors, kind))


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(context, status):
    assert get_order(context["order_id"]).status == status


@then(parsers.cfparse('the order verification is "{verification}"'))
def order_verification_is(context, verification):
    assert get_order(context["order_id"]).verification == verification


@then("the operator balance equals the order price")
def balance_equals_price(context):
    assert settled_balance() == pytest.approx(get_order(context["order_id"]).total_price)


@then("the operator balance is 0")
def balance_is_zero():
    assert settled_balance() == 0.0


@then(parsers.cfparse('the escrow status is "{status}"'))
def escrow_status_is(context, status):
    assert escrow_for(context["order_id"]).status == status


@then("the pending queue is empty")
def pending_queue_is_empty():
    assert queue_size(PENDING_ORDERS) == 0


@then(parsers.cfparse('"{identity}" holds the "{role}" role'))
def holds_role(identity, role):
    assert role_of(identity).value == role
