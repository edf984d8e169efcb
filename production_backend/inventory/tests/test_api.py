# inventory/tests/test_api.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from inventory.models import ProductRecipe, RawMaterial

User = get_user_model()


class InventoryApiTests(TestCase):
    """
    HTTP surface of the stock ledger and recipe registry.
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="storekeeper", password="pass")
        self.client.force_authenticate(user=self.user)

    # --------------------------------------------------
    # AUTH
    # --------------------------------------------------

    def test_anonymous_denied(self):
        anon = APIClient()
        res = anon.get(reverse("material-list"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    # --------------------------------------------------
    # MATERIALS
    # --------------------------------------------------

    def test_add_then_list(self):
        res = self.client.post(
            reverse("material-add"), {"name": "Phenol", "quantity": 120}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_quantity"], 120)

        res = self.client.get(reverse("material-list"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([m["name"] for m in res.data], ["Phenol"])

    def test_register_material_starts_at_zero(self):
        res = self.client.post(
            reverse("material-list"), {"name": "Catalyst", "unit": "litres"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["total_quantity"], 0)
        self.assertEqual(res.data["unit"], "litres")

    def test_add_rejects_zero_quantity(self):
        res = self.client.post(
            reverse("material-add"), {"name": "Phenol", "quantity": 0}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_QUANTITY")

    def test_modify_sets_absolute_quantity(self):
        self.client.post(
            reverse("material-add"), {"name": "Phenol", "quantity": 120}, format="json"
        )

        res = self.client.put(
            reverse("material-modify"),
            {"name": "Phenol", "new_quantity": 75},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(RawMaterial.objects.get(name="Phenol").total_quantity, 75)

    def test_modify_unknown_material_is_404(self):
        res = self.client.put(
            reverse("material-modify"),
            {"name": "Nope", "new_quantity": 1},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_history_is_paginated_and_filterable(self):
        for qty in (10, 20, 30):
            self.client.post(
                reverse("material-add"), {"name": "Phenol", "quantity": qty}, format="json"
            )
        self.client.post(
            reverse("material-add"), {"name": "Formalin", "quantity": 5}, format="json"
        )

        res = self.client.get(reverse("material-history"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 4)

        res = self.client.get(reverse("material-history"), {"material__name": "Phenol"})
        self.assertEqual(res.data["count"], 3)

    # --------------------------------------------------
    # RECIPES
    # --------------------------------------------------

    def test_recipe_create_list_delete(self):
        res = self.client.post(
            reverse("recipe-list"),
            {
                "name": "Resin A",
                "components": [
                    {"material": "Phenol", "ratio": 2},
                    {"material": "Formalin", "ratio": 3},
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(res.data["components"]), 2)

        res = self.client.get(reverse("recipe-list"))
        self.assertEqual([r["name"] for r in res.data], ["Resin A"])

        recipe = ProductRecipe.objects.get(name="Resin A")
        res = self.client.delete(reverse("recipe-detail", args=[recipe.id]))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

        res = self.client.delete(reverse("recipe-detail", args=[recipe.id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
