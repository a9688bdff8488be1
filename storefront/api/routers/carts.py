#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require
from storefront.api.responses import success
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CartItemIn, CartItemUpdate
from storefront.services.cart_service import CartService
from storefront.services.policy import Action

router = APIRouter(prefix="/cart", tags=["cart"])

cart_user = require(Action.CART_USE)


@router.get("")
def get_cart(user: UserModel = Depends(cart_user), db: Session = Depends(get_db)):
    cart = CartService(db).get_cart(user.id)
    return success(cart, "Cart retrieved successfully")


@router.post("")
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(cart_user),
    db: Session = Depends(get_db),
):
    cart = CartService(db).add_item(user.id, payload.product_id, payload.quantity)
    return success(cart, "Item added to cart")


@router.put("")
def update_item(
    payload: CartItemUpdate,
    user: UserModel = Depends(cart_user),
    db: Session = Depends(get_db),
):
    cart = CartService(db).update_item(user.id, payload.product_id, payload.quantity)
    return success(cart, "Cart item updated")


@router.delete("")
def clear_cart(user: UserModel = Depends(cart_user), db: Session = Depends(get_db)):
    cart = CartService(db).clear(user.id)
    return success(cart, "Cart cleared")


@router.delete("/items/{product_id}")
def remove_item(
    product_id: int,
    user: UserModel = Depends(cart_user),
    db: Session = Depends(get_db),
):
    cart = CartService(db).remove_item(user.id, product_id)
    return success(cart, "Item removed from cart")
