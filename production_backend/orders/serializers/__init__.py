from .order import OrderCreateSerializer, OrderSerializer

__all__ = ["OrderCreateSerializer", "OrderSerializer"]
