import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.menu_item import MenuItem
from app.models.order import Order, OrderItem, OrderStatus
from app.schemas.order import OrderCreate, OrderPlaced, OrderResponse
from app.services.errors import InternalError, NotFoundError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _fetch_order(db: AsyncSession, order_id: int) -> Order | None:
    result = await db.execute(
        select(Order).where(Order.id == order_id).options(selectinload(Order.items))
    )
    return result.scalars().first()


async def _read_prices(db: AsyncSession, order_data: OrderCreate) -> dict[int, Decimal]:
    """Read the current price of every referenced menu item, once per item."""
    prices: dict[int, Decimal] = {}
    for item in order_data.items:
        if item.menu_item_id in prices:
            continue
        price = await db.scalar(select(MenuItem.price).where(MenuItem.id == item.menu_item_id))
        if price is None:
            raise NotFoundError(f"Menu item {item.menu_item_id} not found")
        prices[item.menu_item_id] = price
    return prices


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def get_order(db: AsyncSession, order_id: int) -> OrderResponse | None:
    order = await _fetch_order(db, order_id)
    if order is None:
        return None
    return OrderResponse.model_validate(order)


async def place_order(db: AsyncSession, order_data: OrderCreate) -> OrderPlaced:
    """
    Price, total and persist an order with its line items in one transaction.

    The prices read here are the ones stored on the order items, so the order
    total always equals the sum of its line items. Nothing is persisted when
    any step fails.

    Raises:
        NotFoundError: a referenced menu item does not exist.
        InternalError: the store failed; the transaction was rolled back.
    """
    try:
        async with db.begin():
            # 1. Snapshot current prices
            prices = await _read_prices(db, order_data)

            # 2. Calculate total
            total = Decimal("0.00")
            for item in order_data.items:
                total += prices[item.menu_item_id] * item.quantity

            # 3. Persist order + items
            order = Order(
                user_id=order_data.user_id,
                restaurant_id=order_data.restaurant_id,
                total_amount=total,
                status=OrderStatus.PENDING,
                delivery_address=order_data.delivery_address,
            )
            db.add(order)
            await db.flush()  # obtain order.id before inserting items

            for item in order_data.items:
                db.add(
                    OrderItem(
                        order_id=order.id,
                        menu_item_id=item.menu_item_id,
                        quantity=item.quantity,
                        price=prices[item.menu_item_id],
                        special_instructions=item.special_instructions,
                    )
                )
    except SQLAlchemyError as exc:
        raise InternalError("Failed to persist order") from exc

    logger.info(
        "Order persisted",
        extra={
            "order_id": order.id,
            "user_id": order_data.user_id,
            "restaurant_id": order_data.restaurant_id,
            "amount": float(total),
            "item_count": len(order_data.items),
        },
    )
    return OrderPlaced(order_id=order.id, total_amount=total)
