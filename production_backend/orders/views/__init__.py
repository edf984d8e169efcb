from .order import OrderDetailView, OrderListCreateView

__all__ = ["OrderDetailView", "OrderListCreateView"]
