from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.models.order import OrderStatus


class OrderItemCreate(BaseModel):
    menu_item_id: int
    quantity: int = Field(gt=0)
    special_instructions: str | None = None


class OrderCreate(BaseModel):
    user_id: int
    restaurant_id: int
    items: list[OrderItemCreate] = Field(min_length=1)
    delivery_address: str


class OrderPlaced(BaseModel):
    order_id: int
    total_amount: Decimal


class OrderPlacedResponse(OrderPlaced):
    message: str = "Order created successfully"


class OrderItemResponse(BaseModel):
    id: int
    menu_item_id: int
    quantity: int
    price: Decimal
    special_instructions: str | None

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: int
    user_id: int
    restaurant_id: int
    total_amount: Decimal
    status: OrderStatus
    delivery_address: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse]

    model_config = {"from_attributes": True}
