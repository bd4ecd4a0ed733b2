from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ResponseCache, get_cache
from app.database import get_db
from app.schemas.restaurant import RestaurantDetailResponse, RestaurantResponse
from app.services import restaurant_service

router = APIRouter()


@router.get("/restaurants", response_model=list[RestaurantResponse])
async def list_restaurants(
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: ResponseCache = Depends(get_cache),
):
    key = request.url.path
    cached = await cache.get(key)
    if cached is not None:
        return cached

    restaurants = await restaurant_service.list_restaurants(db)
    await cache.set(key, [r.model_dump(mode="json") for r in restaurants])
    return restaurants


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantDetailResponse)
async def get_restaurant(
    restaurant_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    cache: ResponseCache = Depends(get_cache),
):
    key = request.url.path
    cached = await cache.get(key)
    if cached is not None:
        return cached

    restaurant = await restaurant_service.get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    await cache.set(key, restaurant.model_dump(mode="json"))
    return restaurant


@router.get("/search", response_model=list[RestaurantResponse])
async def search_restaurants(
    q: str | None = None,
    cuisine: str | None = None,
    min_rating: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    db: AsyncSession = Depends(get_db),
):
    return await restaurant_service.search_restaurants(
        db, q=q, cuisine=cuisine, min_rating=min_rating, max_price=max_price
    )
