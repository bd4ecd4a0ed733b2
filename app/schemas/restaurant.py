from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.schemas.menu_item import MenuItemResponse


class RestaurantResponse(BaseModel):
    id: int
    name: str
    cuisine: str | None
    rating: Decimal | None
    delivery_time: int | None
    min_order: Decimal | None
    address: str | None
    phone: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RestaurantDetailResponse(RestaurantResponse):
    menu: list[MenuItemResponse] = Field(default_factory=list)
