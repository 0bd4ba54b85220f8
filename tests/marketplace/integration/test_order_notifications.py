"""OrderCreated and OrderDeliver notices reach the notifier exactly once."""

import pytest
from protean import current_domain

from marketplace.errors import InsufficientPayment
from marketplace.notifier import get_notifier
from marketplace.order.cancellation import CancelOrder
from marketplace.order.verification import VerifyOrder


class TestOrderNotifications:
    def test_order_created_notice(self, members, place_order):
        order_id = place_order()

        notices = get_notifier().sent_to(members["client"])
        assert [notice["kind"] for notice in notices] == ["OrderCreated"]
        assert notices[0]["payload"]["order_id"] == order_id

    def test_delivery_notice(self, members, delivered_order):
        notices = get_notifier().sent_to(members["client"])
        assert [notice["kind"] for notice in notices] == ["OrderCreated", "OrderDeliver"]
        assert notices[1]["payload"]["order_id"] == delivered_order
        assert notices[1]["payload"]["dispatcher_id"] == members["dispatcher"]

    def test_later_transitions_send_no_further_notices(self, members, delivered_order):
        current_domain.process(VerifyOrder(caller_id=members["client"], order_id=delivered_order), asynchronous=False)
        assert len(get_notifier().sent_to(members["client"])) == 2

    def test_cancellation_sends_no_notice(self, members, place_order):
        order_id = place_order()
        current_domain.process(CancelOrder(caller_id=members["client"], order_id=order_id), asynchronous=False)
        assert len(get_notifier().sent) == 1

    def test_rejected_creation_sends_no_notice(self, members, place_order):
        with pytest.raises(InsufficientPayment):
            place_order(payment=0.0)
        assert get_notifier().sent == []
