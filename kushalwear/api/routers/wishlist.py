# kushalwear/api/routers/wishlist.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kushalwear.api.deps import get_cart_service, get_current_user, get_lock_service
from kushalwear.data.database import get_db
from kushalwear.data.models.user import UserModel
from kushalwear.domain.schemas import (
    MessageOut,
    MoveToCartIn,
    MoveToCartOut,
    WishlistAddIn,
    WishlistAddOut,
    WishlistCheckOut,
    WishlistResponse,
)
from kushalwear.services.cart_service import CartService
from kushalwear.services.lock_service import BaseLockService
from kushalwear.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def get_service(
    db: Session = Depends(get_db),
    cart_service: CartService = Depends(get_cart_service),
    lock_service: BaseLockService = Depends(get_lock_service),
):
    return WishlistService(db, cart_service, lock_service)


@router.get("", response_model=WishlistResponse, response_model_exclude_none=True)
def get_wishlist(
    user: UserModel = Depends(get_current_user),
    svc: WishlistService = Depends(get_service),
):
    return svc.get_wishlist(user.id)


@router.post("/add", response_model=WishlistAddOut, response_model_exclude_none=True)
def add_to_wishlist(
    payload: WishlistAddIn,
    user: UserModel = Depends(get_current_user),
    svc: WishlistService = Depends(get_service),
):
    return svc.add_product(
        user.id,
        payload.product_id,
        size=payload.size,
        color=payload.color.model_dump() if payload.color else None,
    )


@router.delete("/remove/{product_id}", response_model=MessageOut, response_model_exclude_none=True)
def remove_from_wishlist(
    product_id: str,
    user: UserModel = Depends(get_current_user),
    svc: WishlistService = Depends(get_service),
):
    return {"success": True, **svc.remove_product(user.id, product_id)}


@router.get("/check/{product_id}", response_model=WishlistCheckOut)
def check_wishlist(
    product_id: str,
    user: UserModel = Depends(get_current_user),
    svc: WishlistService = Depends(get_service),
):
    return {"in_wishlist": svc.has_product(user.id, product_id)}


@router.post("/move-to-cart/{product_id}", response_model=MoveToCartOut, response_model_exclude_none=True)
def move_to_cart(
    product_id: str,
    payload: MoveToCartIn | None = None,
    user: UserModel = Depends(get_current_user),
    svc: WishlistService = Depends(get_service),
):
    quantity = payload.quantity if payload else 1
    return svc.move_to_cart(user.id, product_id, quantity)


@router.delete("/clear", response_model=MessageOut, response_model_exclude_none=True)
def clear_wishlist(
    user: UserModel = Depends(get_current_user),
    svc: WishlistService = Depends(get_service),
):
    return {"success": True, **svc.clear(user.id)}
