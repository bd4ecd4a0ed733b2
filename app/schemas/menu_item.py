from decimal import Decimal

from pydantic import BaseModel


class MenuItemResponse(BaseModel):
    id: int
    name: str
    description: str | None
    price: Decimal
    category: str | None
    is_vegetarian: bool
    is_available: bool

    model_config = {"from_attributes": True}
