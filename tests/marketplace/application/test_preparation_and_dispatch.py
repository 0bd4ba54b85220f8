"""Application tests for the warehouse and dispatch stages."""

import pytest
from protean import current_domain

from marketplace.errors import InvalidState, NoActiveClaim, NoValidOrder, Unauthorized
from marketplace.order.dispatch import DeliverOrder, DispatchOrder
from marketplace.order.lookup import dispatcher_claim, get_order, queue_contains, queue_size, warehouse_claim
from marketplace.order.order import OrderStatus
from marketplace.order.preparation import AddOrderToPreparationStage, MoveOrderToDeliverStage
from marketplace.queue.work_queue import DISPATCHED_ORDERS, PENDING_ORDERS


def _run(command):
    return current_domain.process(command, asynchronous=False)


class TestAddOrderToPreparationStage:
    def test_worker_claims_oldest_pending_order(self, members, place_order):
        first = place_order()
        place_order()

        claimed = _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))

        assert claimed == first
        assert warehouse_claim(members["warehouser"]) == first
        order = get_order(first)
        assert order.status == OrderStatus.IN_PREPARATION.value
        assert order.prepared_by == members["warehouser"]
        assert queue_size(PENDING_ORDERS) == 1

    def test_two_workers_claim_distinct_orders(self, members, place_order):
        first = place_order()
        second = place_order()

        claim_a = _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))
        claim_b = _run(AddOrderToPreparationStage(caller_id=members["other_warehouser"]))

        assert {claim_a, claim_b} == {first, second}
        assert warehouse_claim(members["warehouser"]) != warehouse_claim(members["other_warehouser"])

    def test_empty_pending_queue(self, members):
        with pytest.raises(NoValidOrder) as exc_info:
            _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))
        assert "No valid order found in client queue" in str(exc_info.value)

    @pytest.mark.parametrize("caller", ["client", "dispatcher"])
    def test_requires_warehouse_role(self, members, place_order, caller):
        order_id = place_order()
        with pytest.raises(Unauthorized):
            _run(AddOrderToPreparationStage(caller_id=members[caller]))
        assert queue_contains(PENDING_ORDERS, order_id)


class TestMoveOrderToDeliverStage:
    def test_prepared_order_enters_dispatch_queue(self, members, place_order):
        order_id = place_order()
        _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))

        _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))

        assert get_order(order_id).status == OrderStatus.PREPARED.value
        assert queue_contains(DISPATCHED_ORDERS, order_id)
        assert not queue_contains(PENDING_ORDERS, order_id)

    def test_claim_is_kept_after_stage_completion(self, members, place_order):
        order_id = place_order()
        _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))
        _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))
        assert warehouse_claim(members["warehouser"]) == order_id

    def test_without_claim(self, members, place_order):
        place_order()
        with pytest.raises(NoActiveClaim):
            _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))

    def test_no_active_claim_is_an_invalid_state(self, members):
        with pytest.raises(InvalidState):
            _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))

    def test_moving_twice_fails(self, members, place_order):
        place_order()
        _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))
        _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))

        with pytest.raises(InvalidState):
            _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))
        assert queue_size(DISPATCHED_ORDERS) == 1

    def test_requires_warehouse_role(self, members):
        with pytest.raises(Unauthorized):
            _run(MoveOrderToDeliverStage(caller_id=members["dispatcher"]))


class TestDispatchAndDeliver:
    def _prepared(self, members, place_order):
        order_id = place_order()
        _run(AddOrderToPreparationStage(caller_id=members["warehouser"]))
        _run(MoveOrderToDeliverStage(caller_id=members["warehouser"]))
        return order_id

    def test_dispatch_claims_prepared_order(self, members, place_order):
        order_id = self._prepared(members, place_order)

        assert _run(DispatchOrder(caller_id=members["dispatcher"])) == order_id

        order = get_order(order_id)
        assert order.status == OrderStatus.IN_TRANSIT.value
        assert order.delivered_by == members["dispatcher"]
        assert dispatcher_claim(members["dispatcher"]) == order_id
        assert queue_size(DISPATCHED_ORDERS) == 0

    def test_dispatch_with_empty_queue(self, members):
        with pytest.raises(NoValidOrder) as exc_info:
            _run(DispatchOrder(caller_id=members["dispatcher"]))
        assert "No valid order found in dispatch queue" in str(exc_info.value)

    def test_dispatch_ignores_pending_orders(self, members, place_order):
        place_order()
        with pytest.raises(NoValidOrder):
            _run(DispatchOrder(caller_id=members["dispatcher"]))

    def test_deliver(self, members, place_order):
        order_id = self._prepared(members, place_order)
        _run(DispatchOrder(caller_id=members["dispatcher"]))

        assert _run(DeliverOrder(caller_id=members["dispatcher"])) == order_id
        assert get_order(order_id).status == OrderStatus.DELIVERED.value

    def test_deliver_without_claim(self, members):
        with pytest.raises(NoActiveClaim):
            _run(DeliverOrder(caller_id=members["dispatcher"]))

    def test_deliver_twice(self, members, place_order):
        self._prepared(members, place_order)
        _run(DispatchOrder(caller_id=members["dispatcher"]))
        _run(DeliverOrder(caller_id=members["dispatcher"]))
        with pytest.raises(InvalidState):
            _run(DeliverOrder(caller_id=members["dispatcher"]))

    def test_requires_dispatcher_role(self, members, place_order):
        self._prepared(members, place_order)
        with pytest.raises(Unauthorized):
            _run(DispatchOrder(caller_id=members["warehouser"]))
        with pytest.raises(Unauthorized):
            _run(DeliverOrder(caller_id=members["client"]))

    def test_two_dispatchers_claim_distinct_orders(self, members, place_order):
        first = self._prepared(members, place_order)
        second = self._prepared(members, place_order)

        claim_a = _run(DispatchOrder(caller_id=members["dispatcher"]))
        claim_b = _run(DispatchOrder(caller_id=members["other_dispatcher"]))

        assert [claim_a, claim_b] == [first, second]
