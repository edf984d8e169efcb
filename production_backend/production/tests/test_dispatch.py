# production/tests/test_dispatch.py

from datetime import date

from django.test import TestCase, override_settings

from common.exceptions import InvalidQuantityError, InvalidStateError, NotFoundError
from inventory.models import RawMaterial
from inventory.services.recipes import create_recipe
from inventory.services.stock_ledger import receive_material
from orders.models import Order
from orders.services.order_service import create_order
from production.models import Production
from production.services.batch_allocation import allocate_batches
from production.services.capacity import set_batch_capacity
from production.services.dispatch_service import deploy, dispatch_allocation, dispatch_batch
from production.services.production_service import (
    complete,
    delete_production,
    proceed,
    produce,
)

DAY = date(2026, 3, 5)
RESIN = "Resin A"


# --------------------------------------------------
# Helpers
# --------------------------------------------------

def _materials(record):
    return {m["material"]: m["required_quantity"] for m in record.materials_consumed}


def _order(client_name, quantity):
    return create_order(
        client_name=client_name,
        client_location="Lagos",
        product_type=RESIN,
        quantity=quantity,
        scheduled_date=DAY,
    )


class DispatchTestBase(TestCase):
    def setUp(self):
        create_recipe(
            name=RESIN,
            components=[
                {"material": "Phenol", "ratio": 2},
                {"material": "Formalin", "ratio": 3},
            ],
        )
        receive_material(name="Phenol", quantity=100000)
        receive_material(name="Formalin", quantity=100000)
        set_batch_capacity(product_type=RESIN, capacity=5000)

    def _done(self, production):
        proceed(production.id)
        return complete(production.id)


class BatchDispatchTests(DispatchTestBase):
    """
    Batch dispatch.

    GUARANTEES:
    - One deployed output per allocation, carrying its material share
    - Orders are credited with exactly the dispatched quantity
    - The batch is deployed once every allocation has left
    """

    def setUp(self):
        super().setUp()
        self.a = _order("Acme", 3000)
        self.b = _order("Bolt", 3000)
        self.first, self.second = allocate_batches(DAY, RESIN)

    def test_dispatch_whole_batch(self):
        batch = self._done(self.first)

        outputs = dispatch_batch(batch.id)

        self.assertEqual(len(outputs), 2)
        acme, bolt = outputs

        self.assertEqual(acme.status, Production.STATUS_DEPLOYED)
        self.assertFalse(acme.is_batch)
        self.assertEqual(acme.quantity, 3000)
        self.assertEqual(acme.client_name, "Acme")
        self.assertEqual(acme.order_number, f"{self.a.order_number}C1")
        self.assertEqual(acme.original_production_id, batch.id)
        self.assertEqual(acme.from_order_id, self.a.id)
        self.assertAlmostEqual(_materials(acme)["Phenol"], 1200)
        self.assertAlmostEqual(_materials(bolt)["Formalin"], 1200)

        for name in ("Phenol", "Formalin"):
            self.assertAlmostEqual(
                _materials(acme)[name] + _materials(bolt)[name], _materials(batch)[name]
            )

        batch.refresh_from_db()
        self.assertEqual(batch.status, Production.STATUS_DEPLOYED)
        self.assertTrue(all(a.dispatched for a in batch.allocations.all()))

        self.a.refresh_from_db()
        self.b.refresh_from_db()
        self.assertEqual(self.a.status, Order.STATUS_COMPLETED)
        self.assertEqual(self.b.status, Order.STATUS_PARTIALLY_DISPATCHED)
        self.assertEqual(self.b.fulfilled_quantity, 2000)

    def test_second_batch_completes_split_order(self):
        dispatch_batch(self._done(self.first).id)
        second = self._done(self.second)

        dispatch_batch(second.id)

        self.b.refresh_from_db()
        self.assertEqual(self.b.status, Order.STATUS_COMPLETED)
        self.assertEqual(self.b.fulfilled_quantity, 3000)

    def test_dispatch_requires_done(self):
        with self.assertRaises(InvalidStateError):
            dispatch_batch(self.first.id)

        proceed(self.first.id)
        with self.assertRaises(InvalidStateError):
            dispatch_batch(self.first.id)

    def test_dispatch_twice_rejected(self):
        batch = self._done(self.first)
        dispatch_batch(batch.id)

        with self.assertRaises(InvalidStateError):
            dispatch_batch(batch.id)

    def test_dispatch_single_allocation(self):
        batch = self._done(self.first)

        output = dispatch_allocation(batch.id, 1)

        self.assertEqual(output.client_name, "Bolt")
        self.assertEqual(output.quantity, 2000)
        self.assertEqual(output.source_allocation.sequence, 2)

        batch.refresh_from_db()
        self.assertEqual(batch.status, Production.STATUS_DONE)

        with self.assertRaises(InvalidStateError):
            dispatch_allocation(batch.id, 1)

        dispatch_allocation(batch.id, 0)

        batch.refresh_from_db()
        self.assertEqual(batch.status, Production.STATUS_DEPLOYED)
        self.assertIsNotNone(batch.deployed_at)

    def test_dispatch_rest_after_single_allocation(self):
        batch = self._done(self.first)
        dispatch_allocation(batch.id, 0)

        outputs = dispatch_batch(batch.id)

        self.assertEqual([o.client_name for o in outputs], ["Bolt"])

    def test_delete_after_partial_dispatch_restores_only_open_share(self):
        before = {
            name: RawMaterial.objects.get(name=name).total_quantity
            for name in ("Phenol", "Formalin")
        }
        batch = self._done(self.first)
        dispatch_allocation(batch.id, 0)

        batch = delete_production(batch.id)

        self.assertEqual(batch.status, Production.STATUS_DELETED)
        # Acme's 3000 of the 5000 batch left with its output record
        self.assertAlmostEqual(
            RawMaterial.objects.get(name="Phenol").total_quantity, before["Phenol"] - 1200
        )
        self.assertAlmostEqual(
            RawMaterial.objects.get(name="Formalin").total_quantity, before["Formalin"] - 1800
        )

        self.a.refresh_from_db()
        self.b.refresh_from_db()
        self.assertEqual(self.a.status, Order.STATUS_COMPLETED)
        self.assertEqual(self.b.status, Order.STATUS_PENDING)
        self.assertIsNone(self.b.batch_id)

    def test_allocation_index_out_of_range(self):
        batch = self._done(self.first)

        with self.assertRaises(NotFoundError):
            dispatch_allocation(batch.id, 2)

        with self.assertRaises(NotFoundError):
            dispatch_allocation(batch.id, -1)

    def test_deploy_rejects_batches(self):
        batch = self._done(self.first)

        with self.assertRaises(InvalidStateError):
            deploy(batch.id, 100)


@override_settings(OVERFLOW_DESTINATION="Godown")
class DeployTests(DispatchTestBase):
    """
    Non-batch deploy with overflow split.
    """

    def setUp(self):
        super().setUp()
        self.order = _order("Acme", 500)
        self.production = produce(product_type=RESIN, quantity=500, order_id=self.order.id)

    def test_partial_deploy_splits_into_client_and_overflow(self):
        result = deploy(self.production.id, 300)

        source = result["source"]
        client = result["client_record"]
        overflow = result["overflow_record"]

        self.assertEqual(source.status, Production.STATUS_DEPLOYED)
        self.assertEqual(source.split_into, Production.SPLIT_CLIENT_OVERFLOW)

        self.assertEqual(client.quantity, 300)
        self.assertEqual(client.client_name, "Acme")
        self.assertEqual(client.order_number, f"{self.order.order_number}S1")
        self.assertTrue(client.from_split)

        self.assertEqual(overflow.quantity, 200)
        self.assertEqual(overflow.client_name, "Godown")
        self.assertEqual(overflow.order_number, f"{self.order.order_number}S2")
        self.assertEqual(overflow.original_production_id, source.id)

        for name, total in _materials(source).items():
            self.assertAlmostEqual(
                _materials(client)[name] + _materials(overflow)[name], total
            )
        self.assertAlmostEqual(_materials(client)["Phenol"], 120)
        self.assertAlmostEqual(_materials(overflow)["Formalin"], 120)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PARTIALLY_DISPATCHED)
        self.assertEqual(self.order.fulfilled_quantity, 300)

    def test_full_deploy_is_client_only(self):
        result = deploy(self.production.id, 500)

        self.assertIsNone(result["overflow_record"])
        self.assertEqual(result["source"].split_into, Production.SPLIT_CLIENT_ONLY)
        self.assertEqual(result["client_record"].order_number, self.order.order_number)
        self.assertFalse(result["client_record"].from_split)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_COMPLETED)

    def test_deploy_within_tolerance_is_full(self):
        result = deploy(self.production.id, 500 + 1e-12)

        self.assertIsNone(result["overflow_record"])
        self.assertEqual(result["client_record"].quantity, 500)

    def test_manual_production_split_has_no_order_codes(self):
        manual = produce(product_type=RESIN, quantity=50)

        result = deploy(manual.id, 20)

        self.assertEqual(result["client_record"].order_number, "")
        self.assertEqual(result["overflow_record"].order_number, "")
        self.assertEqual(result["overflow_record"].client_name, "Godown")

    def test_invalid_quantities(self):
        for bad in (0, -5, 500.5, "abc"):
            with self.assertRaises(InvalidQuantityError):
                deploy(self.production.id, bad)

        self.production.refresh_from_db()
        self.assertEqual(self.production.status, Production.STATUS_PENDING)

    def test_deploy_twice_rejected(self):
        deploy(self.production.id, 300)

        with self.assertRaises(InvalidStateError):
            deploy(self.production.id, 100)

    def test_deploy_from_done(self):
        self._done(self.production)

        result = deploy(self.production.id, 500)

        self.assertEqual(result["source"].status, Production.STATUS_DEPLOYED)
