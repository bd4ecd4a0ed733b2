import logging
from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.models.menu_item import MenuItem
from app.models.restaurant import Restaurant
from app.schemas.menu_item import MenuItemResponse
from app.schemas.restaurant import RestaurantDetailResponse, RestaurantResponse

logger = logging.getLogger(__name__)

_SAMPLE_DATA = [
    {
        "restaurant": {
            "name": "Spice Garden",
            "cuisine": "Indian",
            "rating": Decimal("4.5"),
            "delivery_time": 30,
            "min_order": Decimal("15.00"),
            "address": "123 Main St, Downtown",
            "phone": "+1-555-0101",
        },
        "menu": [
            {
                "name": "Butter Chicken",
                "description": "Creamy tomato-based curry with tender chicken",
                "price": Decimal("18.99"),
                "category": "Main Course",
                "is_vegetarian": False,
            },
            {
                "name": "Paneer Tikka",
                "description": "Grilled cottage cheese with Indian spices",
                "price": Decimal("16.99"),
                "category": "Appetizer",
                "is_vegetarian": True,
            },
        ],
    },
    {
        "restaurant": {
            "name": "Pizza Palace",
            "cuisine": "Italian",
            "rating": Decimal("4.2"),
            "delivery_time": 25,
            "min_order": Decimal("20.00"),
            "address": "456 Oak Ave, Midtown",
            "phone": "+1-555-0102",
        },
        "menu": [
            {
                "name": "Margherita Pizza",
                "description": "Classic tomato and mozzarella pizza",
                "price": Decimal("22.99"),
                "category": "Pizza",
                "is_vegetarian": True,
            },
            {
                "name": "Chicken Alfredo",
                "description": "Creamy pasta with grilled chicken",
                "price": Decimal("24.99"),
                "category": "Pasta",
                "is_vegetarian": False,
            },
        ],
    },
]


async def seed_sample_data(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Populate restaurants and menus if the table is empty. Called once on startup."""
    async with session_factory() as db:
        result = await db.execute(select(Restaurant).limit(1))
        if result.scalars().first() is not None:
            return
        for entry in _SAMPLE_DATA:
            restaurant = Restaurant(**entry["restaurant"])
            restaurant.menu_items = [MenuItem(**item) for item in entry["menu"]]
            db.add(restaurant)
        await db.commit()
        logger.info("Seeded %d sample restaurants", len(_SAMPLE_DATA))


async def list_restaurants(db: AsyncSession) -> list[RestaurantResponse]:
    result = await db.execute(select(Restaurant).order_by(Restaurant.rating.desc()))
    return [RestaurantResponse.model_validate(r) for r in result.scalars().all()]


async def get_restaurant(db: AsyncSession, restaurant_id: int) -> RestaurantDetailResponse | None:
    result = await db.execute(
        select(Restaurant)
        .where(Restaurant.id == restaurant_id)
        .options(selectinload(Restaurant.menu_items))
    )
    restaurant = result.scalars().first()
    if restaurant is None:
        return None
    return RestaurantDetailResponse(
        **RestaurantResponse.model_validate(restaurant).model_dump(),
        menu=[MenuItemResponse.model_validate(m) for m in restaurant.menu_items],
    )


async def search_restaurants(
    db: AsyncSession,
    q: str | None = None,
    cuisine: str | None = None,
    min_rating: float | None = None,
    max_price: float | None = None,
) -> list[RestaurantResponse]:
    """Filter restaurants; every criterion is optional and they combine with AND.

    ``max_price`` bounds the restaurant's minimum order value.
    """
    stmt = select(Restaurant)
    if q:
        pattern = f"%{q}%"
        stmt = stmt.where(or_(Restaurant.name.ilike(pattern), Restaurant.address.ilike(pattern)))
    if cuisine:
        stmt = stmt.where(Restaurant.cuisine.ilike(f"%{cuisine}%"))
    if min_rating is not None:
        stmt = stmt.where(Restaurant.rating >= min_rating)
    if max_price is not None:
        stmt = stmt.where(Restaurant.min_order <= max_price)

    result = await db.execute(stmt.order_by(Restaurant.rating.desc()))
    return [RestaurantResponse.model_validate(r) for r in result.scalars().all()]
