# inventory/tests/test_recipes.py

from django.test import TestCase

from common.exceptions import InvalidQuantityError, InvalidStateError, NotFoundError
from inventory.models import ProductRecipe, RawMaterial
from inventory.services.recipes import compute_required_materials, create_recipe, delete_recipe


class RecipeTests(TestCase):
    def setUp(self):
        create_recipe(
            name="Resin A",
            components=[
                {"material": "Phenol", "ratio": 2},
                {"material": "Formalin", "ratio": 3},
            ],
        )

    def test_requirements_are_proportional_to_ratios(self):
        required = compute_required_materials("Resin A", 100)

        self.assertEqual(
            required,
            [
                {"material": "Phenol", "required_quantity": 40.0},
                {"material": "Formalin", "required_quantity": 60.0},
            ],
        )

    def test_unknown_product_type(self):
        with self.assertRaises(NotFoundError):
            compute_required_materials("Resin Z", 100)

    def test_non_positive_quantity(self):
        with self.assertRaises(InvalidQuantityError):
            compute_required_materials("Resin A", 0)

    def test_create_registers_unknown_materials_with_zero_stock(self):
        self.assertEqual(RawMaterial.objects.get(name="Phenol").total_quantity, 0)

    def test_duplicate_recipe_rejected(self):
        with self.assertRaises(InvalidStateError):
            create_recipe(name="Resin A", components=[{"material": "Phenol", "ratio": 1}])

    def test_ratio_must_be_positive(self):
        with self.assertRaises(InvalidQuantityError):
            create_recipe(name="Resin B", components=[{"material": "Phenol", "ratio": 0}])

        self.assertFalse(ProductRecipe.objects.filter(name="Resin B").exists())

    def test_delete_recipe(self):
        recipe = ProductRecipe.objects.get(name="Resin A")

        delete_recipe(recipe_id=recipe.id)

        self.assertFalse(ProductRecipe.objects.filter(name="Resin A").exists())
        # materials survive their recipes
        self.assertTrue(RawMaterial.objects.filter(name="Phenol").exists())
