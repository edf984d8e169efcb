# orders/views/order.py

"""
ORDER API

- GET  /api/orders/        list (filter: status, product_type, scheduled_date, client_name)
- POST /api/orders/        create a pending order
- GET  /api/orders/<id>/   retrieve
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import ListAPIView, RetrieveAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api import error_response_for
from common.exceptions import EngineError
from orders.models import Order
from orders.serializers import OrderCreateSerializer, OrderSerializer
from orders.services.order_service import create_order


class OrderListCreateView(ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    queryset = Order.objects.all().order_by("-created_at")
    filterset_fields = ["status", "product_type", "scheduled_date", "client_name"]

    @extend_schema(tags=["orders"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["orders"],
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
    )
    def post(self, request):
        s = OrderCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            order = create_order(**s.validated_data)
        except EngineError as exc:
            return error_response_for(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(RetrieveAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    queryset = Order.objects.all()
    lookup_url_kwarg = "order_id"

    @extend_schema(tags=["orders"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
