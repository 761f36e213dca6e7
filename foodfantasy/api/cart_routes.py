from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.core.errors import NotFoundError
from foodfantasy.core.responses import success
from foodfantasy.crud import cart as cart_crud
from foodfantasy.db import get_db
from foodfantasy.schemas.cart import CartItemAdd, CartItemUpdate, CartRead
from foodfantasy.utils.emails import normalize_email

router = APIRouter()


def _cart_response(cart, user_email: str, message: str):
    if cart is None:
        data = CartRead(user_email=normalize_email(user_email), items=[])
    else:
        data = CartRead.model_validate(cart)
    return success(data, message=message)


@router.get("")
async def get_cart(
    user_email: str = Query(..., alias="userEmail", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_crud.get_cart(db, user_email)
    return _cart_response(cart, user_email, "Cart retrieved successfully")


@router.post("/add")
async def add_to_cart(item: CartItemAdd, db: AsyncSession = Depends(get_db)):
    cart = await cart_crud.add_item(db, item)
    return _cart_response(cart, item.user_email, "Item added to cart")


@router.put("/update")
async def update_cart_item(update: CartItemUpdate, db: AsyncSession = Depends(get_db)):
    cart = await cart_crud.get_cart(db, update.user_email)
    if not cart:
        raise NotFoundError("Cart")
    cart = await cart_crud.update_item_quantity(db, cart, update.food_id, update.quantity)
    if not cart:
        raise NotFoundError("Cart item")
    return _cart_response(cart, update.user_email, "Cart updated")


@router.delete("/remove")
async def remove_from_cart(
    user_email: str = Query(..., alias="userEmail", min_length=1),
    food_id: str = Query(..., alias="foodId", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_crud.get_cart(db, user_email)
    if not cart:
        raise NotFoundError("Cart")
    cart = await cart_crud.remove_item(db, cart, food_id)
    return _cart_response(cart, user_email, "Item removed from cart")


@router.delete("/clear")
async def clear_cart(
    user_email: str = Query(..., alias="userEmail", min_length=1),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_crud.get_cart(db, user_email)
    if cart:
        cart = await cart_crud.clear_cart(db, cart)
    return _cart_response(cart, user_email, "Cart cleared")
