# app/models/__init__.py
from .menu import MenuItem, MenuCategory
from .order import Order, OrderStatus, OrderPriority, PaymentMethod, STATUS_PIPELINE, FINAL_STATUSES
from .stock_adjustment import StockAdjustment
from .token_counter import TokenCounter

# Export all models
__all__ = [
    "FINAL_STATUSES",
    "MenuCategory",
    "MenuItem",
    "Order",
    "OrderPriority",
    "OrderStatus",
    "PaymentMethod",
    "STATUS_PIPELINE",
    "StockAdjustment",
    "TokenCounter",
]
