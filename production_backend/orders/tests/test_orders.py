# orders/tests/test_orders.py

import uuid
from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from common.exceptions import InvalidQuantityError, InvalidStateError, NotFoundError
from orders.models import Order
from orders.services.order_service import (
    apply_fulfillment,
    create_order,
    get_order,
    location_code,
    mark_batched,
    release_order,
    start_order,
)

User = get_user_model()


@override_settings(ORDER_NUMBER_PREFIX="AKO")
class OrderServiceTests(TestCase):
    """
    Order store.

    GUARANTEES:
    - Order numbers are PREFIX-LOC-DDMMYYYY-NNNNN and never reused
    - fulfilled_quantity is clamped at quantity
    - completed is terminal
    """

    def _create(self, **overrides):
        data = {
            "client_name": "Acme",
            "client_location": "Lagos",
            "product_type": "Resin A",
            "quantity": 100,
            "scheduled_date": date(2026, 3, 5),
        }
        data.update(overrides)
        return create_order(**data)

    # --------------------------------------------------
    # NUMBERING
    # --------------------------------------------------

    def test_location_code(self):
        self.assertEqual(location_code("Lagos"), "LAG")
        self.assertEqual(location_code(" port-harcourt "), "POR")
        self.assertEqual(location_code(""), "UNK")
        self.assertEqual(location_code(None), "UNK")

    def test_order_number_format_and_serial(self):
        first = self._create()
        second = self._create(client_name="Bolt")
        other_day = self._create(scheduled_date=date(2026, 3, 6))

        self.assertEqual(first.order_number, "AKO-LAG-05032026-00001")
        self.assertEqual(second.order_number, "AKO-LAG-05032026-00002")
        self.assertEqual(other_day.order_number, "AKO-LAG-06032026-00001")

    def test_order_number_without_location(self):
        order = self._create(client_location="")
        self.assertEqual(order.order_number, "AKO-UNK-05032026-00001")

    def test_create_defaults(self):
        order = self._create(scheduled_date="2026-03-05")

        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.fulfilled_quantity, 0)
        self.assertEqual(order.unit, "litres")
        self.assertEqual(order.scheduled_date, date(2026, 3, 5))
        self.assertIsNone(order.batch_id)

    def test_create_rejects_non_positive_quantity(self):
        with self.assertRaises(InvalidQuantityError):
            self._create(quantity=0)

        self.assertFalse(Order.objects.exists())

    def test_get_order_not_found(self):
        with self.assertRaises(NotFoundError):
            get_order(uuid.uuid4())

    # --------------------------------------------------
    # FULFILLMENT
    # --------------------------------------------------

    def test_partial_then_complete(self):
        order = self._create()

        order = apply_fulfillment(order.id, 40)
        self.assertEqual(order.status, Order.STATUS_PARTIALLY_DISPATCHED)
        self.assertEqual(order.fulfilled_quantity, 40)
        self.assertIsNone(order.completed_at)

        order = apply_fulfillment(order.id, 60)
        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertEqual(order.fulfilled_quantity, 100)
        self.assertIsNotNone(order.completed_at)

    def test_over_delivery_is_clamped(self):
        order = self._create()

        order = apply_fulfillment(order.id, 250)

        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertEqual(order.fulfilled_quantity, 100)

    def test_completed_order_rejects_more_fulfillment(self):
        order = self._create()
        apply_fulfillment(order.id, 100)

        with self.assertRaises(InvalidStateError):
            apply_fulfillment(order.id, 1)

    def test_fulfillment_quantity_must_be_positive(self):
        order = self._create()

        with self.assertRaises(InvalidQuantityError):
            apply_fulfillment(order.id, 0)

    # --------------------------------------------------
    # BATCH / RELEASE
    # --------------------------------------------------

    def test_mark_batched_then_release(self):
        order = self._create()
        batch_id = uuid.uuid4()

        mark_batched(order, batch_id=batch_id)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_BATCHED)
        self.assertEqual(order.batch_id, batch_id)
        self.assertIsNotNone(order.batched_at)

        release_order(order)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertIsNone(order.batch_id)
        self.assertIsNone(order.batched_at)

    def test_release_keeps_partial_progress(self):
        order = self._create()
        apply_fulfillment(order.id, 30)
        order.refresh_from_db()
        mark_batched(order, batch_id=uuid.uuid4())

        release_order(order)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_PARTIALLY_DISPATCHED)
        self.assertEqual(order.fulfilled_quantity, 30)

    def test_start_keeps_partial_progress(self):
        order = self._create()
        apply_fulfillment(order.id, 30)
        order.refresh_from_db()

        start_order(order)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_PARTIALLY_DISPATCHED)
        self.assertEqual(order.fulfilled_quantity, 30)

    def test_start_twice_rejected(self):
        order = self._create()
        start_order(order)

        with self.assertRaises(InvalidStateError):
            start_order(order)


class OrderApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="planner", password="pass")
        self.client.force_authenticate(user=self.user)

    def test_create_and_retrieve(self):
        res = self.client.post(
            reverse("order-list"),
            {
                "client_name": "Acme",
                "client_location": "Abuja",
                "product_type": "Resin A",
                "quantity": 3000,
                "scheduled_date": "2026-03-05",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["status"], Order.STATUS_PENDING)
        self.assertTrue(res.data["order_number"].endswith("-ABU-05032026-00001"))
        self.assertEqual(res.data["outstanding_quantity"], 3000)

        res = self.client.get(reverse("order-detail", args=[res.data["id"]]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["client_name"], "Acme")

    def test_create_rejects_zero_quantity(self):
        res = self.client.post(
            reverse("order-list"),
            {
                "client_name": "Acme",
                "product_type": "Resin A",
                "quantity": 0,
                "scheduled_date": "2026-03-05",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters_by_status(self):
        create_order(
            client_name="Acme",
            product_type="Resin A",
            quantity=10,
            scheduled_date=date(2026, 3, 5),
        )
        done = create_order(
            client_name="Bolt",
            product_type="Resin A",
            quantity=10,
            scheduled_date=date(2026, 3, 5),
        )
        apply_fulfillment(done.id, 10)

        res = self.client.get(reverse("order-list"), {"status": Order.STATUS_COMPLETED})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["client_name"], "Bolt")

    def test_unknown_order_is_404(self):
        res = self.client.get(reverse("order-detail", args=[uuid.uuid4()]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
