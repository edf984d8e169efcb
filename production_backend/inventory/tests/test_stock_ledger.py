# inventory/tests/test_stock_ledger.py

from django.test import TestCase

from common.exceptions import InsufficientStockError, InvalidQuantityError, NotFoundError
from inventory.models import MaterialMovement, RawMaterial
from inventory.services.stock_ledger import (
    deduct_materials,
    receive_material,
    restore_materials,
    set_material_quantity,
)
from production.models import Production


class StockLedgerTests(TestCase):
    """
    Raw material stock ledger.

    GUARANTEES:
    - Intake upserts and increments
    - Deduction is all-or-nothing
    - Stock is never negative
    - Every mutation leaves a movement row
    """

    def setUp(self):
        self.production = Production.objects.create(
            product_type="Resin A",
            quantity=100,
        )

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _qty(self, name):
        return RawMaterial.objects.get(name=name).total_quantity

    # --------------------------------------------------
    # INTAKE
    # --------------------------------------------------

    def test_receive_creates_missing_material(self):
        material = receive_material(name="Phenol", quantity=25)

        self.assertEqual(material.name, "Phenol")
        self.assertEqual(self._qty("Phenol"), 25)

        movement = MaterialMovement.objects.get(material=material)
        self.assertEqual(movement.reason, MaterialMovement.Reason.RECEIPT)
        self.assertEqual(movement.movement_type, MaterialMovement.MovementType.IN)
        self.assertEqual(movement.balance_after, 25)

    def test_receive_increments_existing_material(self):
        receive_material(name="Phenol", quantity=25)
        receive_material(name="Phenol", quantity=5.5)

        self.assertAlmostEqual(self._qty("Phenol"), 30.5)
        self.assertEqual(RawMaterial.objects.filter(name="Phenol").count(), 1)
        self.assertEqual(MaterialMovement.objects.count(), 2)

    def test_receive_rejects_non_positive_quantity(self):
        with self.assertRaises(InvalidQuantityError):
            receive_material(name="Phenol", quantity=0)

        with self.assertRaises(InvalidQuantityError):
            receive_material(name="Phenol", quantity=-3)

        self.assertFalse(RawMaterial.objects.filter(name="Phenol").exists())

    # --------------------------------------------------
    # ADJUSTMENT
    # --------------------------------------------------

    def test_set_quantity_records_adjustment(self):
        receive_material(name="Formalin", quantity=40)

        set_material_quantity(name="Formalin", new_quantity=32)

        self.assertEqual(self._qty("Formalin"), 32)
        adjustment = MaterialMovement.objects.get(
            reason=MaterialMovement.Reason.ADJUSTMENT
        )
        self.assertEqual(adjustment.movement_type, MaterialMovement.MovementType.OUT)
        self.assertEqual(adjustment.quantity, 8)

    def test_set_quantity_unknown_material(self):
        with self.assertRaises(NotFoundError):
            set_material_quantity(name="Unobtainium", new_quantity=1)

    def test_set_quantity_rejects_negative(self):
        receive_material(name="Formalin", quantity=40)

        with self.assertRaises(InvalidQuantityError):
            set_material_quantity(name="Formalin", new_quantity=-1)

        self.assertEqual(self._qty("Formalin"), 40)

    # --------------------------------------------------
    # DEDUCTION
    # --------------------------------------------------

    def test_deduct_all_materials(self):
        receive_material(name="Phenol", quantity=50)
        receive_material(name="Formalin", quantity=80)

        movements = deduct_materials(
            [
                {"material": "Phenol", "required_quantity": 40},
                {"material": "Formalin", "required_quantity": 60},
            ],
            production=self.production,
        )

        self.assertEqual(len(movements), 2)
        self.assertEqual(self._qty("Phenol"), 10)
        self.assertEqual(self._qty("Formalin"), 20)
        self.assertEqual(
            self.production.material_movements.filter(
                reason=MaterialMovement.Reason.PRODUCTION
            ).count(),
            2,
        )

    def test_one_short_material_aborts_whole_deduction(self):
        receive_material(name="Phenol", quantity=50)
        receive_material(name="Formalin", quantity=10)

        with self.assertRaises(InsufficientStockError) as ctx:
            deduct_materials(
                [
                    {"material": "Phenol", "required_quantity": 40},
                    {"material": "Formalin", "required_quantity": 60},
                ],
                production=self.production,
            )

        self.assertEqual(set(ctx.exception.shortfalls), {"Formalin"})
        self.assertAlmostEqual(ctx.exception.shortfalls["Formalin"], 50)
        self.assertIn("Formalin", str(ctx.exception))

        # nothing changed
        self.assertEqual(self._qty("Phenol"), 50)
        self.assertEqual(self._qty("Formalin"), 10)
        self.assertFalse(
            MaterialMovement.objects.filter(reason=MaterialMovement.Reason.PRODUCTION).exists()
        )

    def test_missing_material_counts_as_zero_stock(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            deduct_materials(
                [{"material": "Hardener", "required_quantity": 7}],
                production=self.production,
            )

        self.assertEqual(ctx.exception.shortfalls, {"Hardener": 7.0})

    def test_deduction_within_tolerance_never_goes_negative(self):
        receive_material(name="Phenol", quantity=1)
        set_material_quantity(name="Phenol", new_quantity=0.3)

        deduct_materials(
            [{"material": "Phenol", "required_quantity": 0.1 + 0.2}],
            production=self.production,
        )

        self.assertGreaterEqual(self._qty("Phenol"), 0)
        self.assertAlmostEqual(self._qty("Phenol"), 0)

    # --------------------------------------------------
    # REVERSAL
    # --------------------------------------------------

    def test_restore_adds_back_and_upserts(self):
        receive_material(name="Phenol", quantity=50)
        deduct_materials(
            [{"material": "Phenol", "required_quantity": 20}],
            production=self.production,
        )

        restore_materials(
            [
                {"material": "Phenol", "required_quantity": 20},
                {"material": "Catalyst", "required_quantity": 2},
            ],
            production=self.production,
        )

        self.assertEqual(self._qty("Phenol"), 50)
        self.assertEqual(self._qty("Catalyst"), 2)
        self.assertEqual(
            MaterialMovement.objects.filter(reason=MaterialMovement.Reason.REVERSAL).count(),
            2,
        )
