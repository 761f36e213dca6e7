from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from foodfantasy.core.constants import FoodType
from foodfantasy.models.food import Food
from foodfantasy.schemas.food import FoodCreate, FoodUpdate


async def create_food(db: AsyncSession, food: FoodCreate) -> Food:
    new_food = Food(**food.model_dump())
    db.add(new_food)
    await db.commit()
    await db.refresh(new_food)
    return new_food


async def get_foods(
    db: AsyncSession,
    category: Optional[str] = None,
    food_type: Optional[FoodType] = None,
    available: Optional[bool] = None,
) -> List[Food]:
    query = select(Food)
    if category:
        query = query.where(Food.category == category)
    if food_type:
        query = query.where(Food.type == food_type)
    if available is not None:
        query = query.where(Food.available.is_(available))

    result = await db.execute(query.order_by(Food.created_at.desc()))
    return result.scalars().all()


async def get_food(db: AsyncSession, food_id: str) -> Optional[Food]:
    result = await db.execute(select(Food).where(Food.id == food_id))
    return result.scalar_one_or_none()


async def update_food(db: AsyncSession, food_id: str, updates: FoodUpdate) -> Optional[Food]:
    food = await get_food(db, food_id)
    if not food:
        return None

    for key, value in updates.model_dump(exclude_unset=True).items():
        if value is None and key != "image":
            continue
        setattr(food, key, value)

    await db.commit()
    await db.refresh(food)
    return food


async def set_food_image(db: AsyncSession, food: Food, image: str) -> Food:
    food.image = image
    await db.commit()
    await db.refresh(food)
    return food


async def delete_food(db: AsyncSession, food_id: str) -> Optional[Food]:
    food = await get_food(db, food_id)
    if food:
        await db.delete(food)
        await db.commit()
    return food
