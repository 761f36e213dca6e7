from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from foodfantasy.models.cart import Cart, CartItem
from foodfantasy.schemas.cart import CartItemAdd
from foodfantasy.utils.emails import normalize_email


async def get_cart(db: AsyncSession, user_email: str) -> Optional[Cart]:
    result = await db.execute(select(Cart).where(Cart.user_email == normalize_email(user_email)))
    return result.scalar_one_or_none()


def _find_item(cart: Cart, food_id: str) -> Optional[CartItem]:
    return next((i for i in cart.items if i.food_id == food_id), None)


async def add_item(db: AsyncSession, item: CartItemAdd) -> Cart:
    """Adds a line, or bumps its quantity when the food is already in the cart."""
    cart = await get_cart(db, item.user_email)
    if not cart:
        cart = Cart(
            user_email=normalize_email(item.user_email),
            user_id=item.user_id or "",
            user_name=item.user_name or "Guest User",
            items=[],
        )
        db.add(cart)

    existing = _find_item(cart, item.food_id)
    if existing:
        existing.quantity += item.quantity
    else:
        cart.items.append(
            CartItem(
                food_id=item.food_id,
                food_name=item.food_name,
                category=item.category or "Uncategorized",
                type=item.type,
                quantity=item.quantity,
                price=item.price,
                image=item.image or "",
                position=len(cart.items),
            )
        )

    await db.commit()
    return cart


async def update_item_quantity(db: AsyncSession, cart: Cart, food_id: str, quantity: int) -> Optional[Cart]:
    existing = _find_item(cart, food_id)
    if not existing:
        return None
    existing.quantity = quantity
    await db.commit()
    return cart


async def remove_item(db: AsyncSession, cart: Cart, food_id: str) -> Cart:
    existing = _find_item(cart, food_id)
    if existing:
        cart.items.remove(existing)
        await db.commit()
    return cart


async def clear_cart(db: AsyncSession, cart: Cart) -> Cart:
    cart.items.clear()
    await db.commit()
    return cart
