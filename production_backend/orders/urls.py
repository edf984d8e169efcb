# orders/urls.py

"""
ORDERS URLS

Mounted under /api/orders/
"""

from django.urls import path

from orders.views import OrderDetailView, OrderListCreateView

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
]
