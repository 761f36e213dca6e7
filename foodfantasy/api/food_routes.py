import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.auth.dependencies import get_current_admin
from foodfantasy.config import settings
from foodfantasy.core.constants import FoodType
from foodfantasy.core.errors import BadRequestError, NotFoundError, StorageNotConfiguredError
from foodfantasy.core.responses import success
from foodfantasy.crud import food as food_crud
from foodfantasy.db import get_db
from foodfantasy.models.admin import Admin
from foodfantasy.schemas.food import FoodCreate, FoodRead, FoodUpdate
from foodfantasy.services.cache import FOODS_KEY, cache
from foodfantasy.utils import spaces
from foodfantasy.utils.broadcast import broadcast_food_event

log = logging.getLogger(__name__)

router = APIRouter()


# 📋 GET: the menu, optionally narrowed to a category, type or availability
@router.get("")
async def list_foods(
    category: Optional[str] = Query(None),
    type: Optional[FoodType] = Query(None),
    available: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    unfiltered = category is None and type is None and available is None
    if unfiltered:
        cached = await cache.get(FOODS_KEY)
        if cached is not None:
            return success(cached, message="Foods retrieved successfully")

    foods = await food_crud.get_foods(db, category=category, food_type=type, available=available)
    data = [FoodRead.model_validate(f) for f in foods]
    if unfiltered:
        await cache.set(FOODS_KEY, jsonable_encoder(data, by_alias=True), settings.food_cache_ttl_seconds)
    return success(data, message="Foods retrieved successfully")


@router.get("/{food_id}")
async def get_food(food_id: str, db: AsyncSession = Depends(get_db)):
    food = await food_crud.get_food(db, food_id)
    if not food:
        raise NotFoundError("Food item")
    return success(FoodRead.model_validate(food), message="Food retrieved successfully")


# ➕ POST: add a dish to the menu
@router.post("/add")
async def add_food(
    food_in: FoodCreate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    food = await food_crud.create_food(db, food_in)
    log.info("food added: id=%s name=%s by=%s", food.id, food.name, admin.email)

    data = FoodRead.model_validate(food)
    await cache.invalidate(FOODS_KEY)
    await broadcast_food_event("newFoodAdded", data)
    return success(data, message="Food item added successfully", status_code=201)


@router.put("/{food_id}")
async def update_food(
    food_id: str,
    updates: FoodUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    food = await food_crud.update_food(db, food_id, updates)
    if not food:
        raise NotFoundError("Food item")
    log.info("food updated: id=%s by=%s", food.id, admin.email)

    data = FoodRead.model_validate(food)
    await cache.invalidate(FOODS_KEY)
    await broadcast_food_event("foodUpdated", data)
    return success(data, message="Food item updated successfully")


# 🖼️ POST: upload a photo to Spaces and point the dish at its CDN url
@router.post("/{food_id}/image")
async def upload_food_image(
    food_id: str,
    image: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    food = await food_crud.get_food(db, food_id)
    if not food:
        raise NotFoundError("Food item")
    if not spaces.is_configured():
        raise StorageNotConfiguredError()

    try:
        key = spaces.image_key("foods", image.filename)
    except ValueError as e:
        raise BadRequestError(str(e))

    contents = await image.read()
    if not contents:
        raise BadRequestError("Image file is empty")
    if len(contents) > spaces.MAX_IMAGE_BYTES:
        raise BadRequestError("Image file too large (max 10MB)")

    await spaces.put_public_object(key=key, body=contents, content_type=image.content_type)
    food = await food_crud.set_food_image(db, food, spaces.public_url(key))

    log.info("food image uploaded: id=%s key=%s by=%s", food.id, key, admin.email)

    data = FoodRead.model_validate(food)
    await cache.invalidate(FOODS_KEY)
    await broadcast_food_event("foodUpdated", data)
    return success(data, message="Food image uploaded successfully")


@router.delete("/{food_id}")
async def delete_food(
    food_id: str,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    food = await food_crud.delete_food(db, food_id)
    if not food:
        raise NotFoundError("Food item")
    log.info("food deleted: id=%s by=%s", food_id, admin.email)
    await cache.invalidate(FOODS_KEY)
    await broadcast_food_event("foodDeleted", {"id": food_id})
    return success({"id": food_id}, message="Food item deleted successfully")
