# Import all models here so SQLAlchemy registers them with Base.metadata
from app.models.menu_item import MenuItem
from app.models.order import Order, OrderItem, OrderStatus
from app.models.restaurant import Restaurant

__all__ = [
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Restaurant",
]
