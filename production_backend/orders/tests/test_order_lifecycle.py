# orders/tests/test_order_lifecycle.py

from datetime import date

from django.test import TestCase

from common.exceptions import InvalidStateError
from orders.models import Order
from orders.services import order_lifecycle as lifecycle


class OrderLifecycleTests(TestCase):
    """
    Pure transition rules, no persistence involved.
    """

    def _order(self, status, *, quantity=100, fulfilled=0):
        return Order(
            order_number="AKO-LAG-01012026-00001",
            client_name="Acme",
            product_type="Resin A",
            quantity=quantity,
            fulfilled_quantity=fulfilled,
            scheduled_date=date(2026, 1, 1),
            status=status,
        )

    def test_completed_is_terminal(self):
        for operation in (
            lifecycle.OP_BATCH,
            lifecycle.OP_START,
            lifecycle.OP_RELEASE,
            lifecycle.OP_FULFILL,
        ):
            self.assertFalse(
                lifecycle.can_apply(operation=operation, from_status=Order.STATUS_COMPLETED)
            )

    def test_start_not_allowed_when_in_progress(self):
        order = self._order(Order.STATUS_IN_PROGRESS)

        with self.assertRaises(InvalidStateError):
            lifecycle.validate_operation(order=order, operation=lifecycle.OP_START)

    def test_release_target_depends_on_fulfilled(self):
        fresh = self._order(Order.STATUS_BATCHED)
        partial = self._order(Order.STATUS_BATCHED, fulfilled=40)

        self.assertEqual(
            lifecycle.target_status(order=fresh, operation=lifecycle.OP_RELEASE),
            Order.STATUS_PENDING,
        )
        self.assertEqual(
            lifecycle.target_status(order=partial, operation=lifecycle.OP_RELEASE),
            Order.STATUS_PARTIALLY_DISPATCHED,
        )

    def test_start_never_rolls_back_delivered_progress(self):
        fresh = self._order(Order.STATUS_PENDING)
        partial = self._order(Order.STATUS_PARTIALLY_DISPATCHED, fulfilled=40)

        self.assertEqual(
            lifecycle.target_status(order=fresh, operation=lifecycle.OP_START),
            Order.STATUS_IN_PROGRESS,
        )
        self.assertEqual(
            lifecycle.target_status(order=partial, operation=lifecycle.OP_START),
            Order.STATUS_PARTIALLY_DISPATCHED,
        )

    def test_fulfill_target_within_tolerance_completes(self):
        order = self._order(Order.STATUS_BATCHED, quantity=0.3)

        self.assertEqual(
            lifecycle.target_status(
                order=order,
                operation=lifecycle.OP_FULFILL,
                fulfilled_quantity=0.1 + 0.2,
            ),
            Order.STATUS_COMPLETED,
        )
        self.assertEqual(
            lifecycle.target_status(
                order=order,
                operation=lifecycle.OP_FULFILL,
                fulfilled_quantity=0.1,
            ),
            Order.STATUS_PARTIALLY_DISPATCHED,
        )

    def test_unknown_operation(self):
        with self.assertRaises(InvalidStateError):
            lifecycle.target_status(order=self._order(Order.STATUS_PENDING), operation="x")
