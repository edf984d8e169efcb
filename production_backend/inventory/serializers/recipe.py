# inventory/serializers/recipe.py

from rest_framework import serializers

from inventory.models import ProductRecipe


class ProductRecipeSerializer(serializers.ModelSerializer):
    components = serializers.SerializerMethodField()

    class Meta:
        model = ProductRecipe
        fields = ["id", "name", "components", "created_at"]

    def get_components(self, obj):
        return [
            {"material": c.material.name, "ratio": c.ratio}
            for c in obj.components.select_related("material").all()
        ]


class RecipeComponentInputSerializer(serializers.Serializer):
    material = serializers.CharField(max_length=128)
    ratio = serializers.FloatField()

    def validate_ratio(self, value):
        if value <= 0:
            raise serializers.ValidationError("ratio must be greater than zero")
        return value


class ProductRecipeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128)
    components = RecipeComponentInputSerializer(many=True, allow_empty=False)
