# inventory/views/recipe.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api import error_response_for
from common.exceptions import EngineError
from inventory.models import ProductRecipe
from inventory.serializers import ProductRecipeCreateSerializer, ProductRecipeSerializer
from inventory.services.recipes import create_recipe, delete_recipe


class RecipeListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductRecipeCreateSerializer

    @extend_schema(tags=["inventory"], responses=ProductRecipeSerializer(many=True))
    def get(self, request):
        qs = ProductRecipe.objects.prefetch_related("components__material").order_by("name")
        return Response(
            ProductRecipeSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["inventory"],
        request=ProductRecipeCreateSerializer,
        responses={201: ProductRecipeSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            recipe = create_recipe(
                name=s.validated_data["name"],
                components=s.validated_data["components"],
            )
        except EngineError as exc:
            return error_response_for(exc)

        return Response(
            ProductRecipeSerializer(recipe).data, status=status.HTTP_201_CREATED
        )


class RecipeDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductRecipeSerializer

    @extend_schema(tags=["inventory"], responses={204: None})
    def delete(self, request, recipe_id):
        try:
            delete_recipe(recipe_id=recipe_id)
        except EngineError as exc:
            return error_response_for(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
