import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.metrics import ORDERS_PLACED
from app.schemas.order import OrderCreate, OrderPlacedResponse, OrderResponse
from app.services import order_service
from app.services.errors import InternalError, NotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


@router.post("", response_model=OrderPlacedResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    body: OrderCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> OrderPlacedResponse:
    request_id = _request_id(request)
    logger.info(
        "Received place_order request",
        extra={
            "request_id": request_id,
            "user_id": body.user_id,
            "restaurant_id": body.restaurant_id,
        },
    )
    try:
        placed = await order_service.place_order(db, body)
    except NotFoundError as exc:
        ORDERS_PLACED.labels("not_found").inc()
        logger.info("Order rejected", extra={"request_id": request_id, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InternalError:
        ORDERS_PLACED.labels("error").inc()
        logger.exception("Order placement failed", extra={"request_id": request_id})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to place order",
        )

    ORDERS_PLACED.labels("success").inc()
    return OrderPlacedResponse(order_id=placed.order_id, total_amount=placed.total_amount)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    logger.info(
        "Received get_order request",
        extra={"request_id": _request_id(request), "order_id": order_id},
    )
    order = await order_service.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order
