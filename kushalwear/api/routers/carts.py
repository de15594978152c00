# kushalwear/api/routers/carts.py
from fastapi import APIRouter, Depends

from kushalwear.api.deps import get_cart_service, get_current_user
from kushalwear.data.models.user import UserModel
from kushalwear.domain.schemas import (
    CartCountOut,
    CartMergeIn,
    CartMergeOut,
    CartResponse,
    ItemIn,
    QuantityIn,
)
from kushalwear.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse, response_model_exclude_none=True)
def get_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return {"cart": svc.get_cart(user.id)}


@router.post("", response_model=CartResponse, response_model_exclude_none=True)
def add_item(
    payload: ItemIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.add_item(
        user.id,
        payload.product_id,
        payload.quantity,
        size=payload.size,
        color=payload.color.model_dump() if payload.color else None,
    )
    return {"message": "Item added to cart successfully", "cart": cart}


@router.get("/count", response_model=CartCountOut)
def cart_count(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return {"count": svc.count(user.id)}


@router.post("/merge", response_model=CartMergeOut, response_model_exclude_none=True)
def merge_guest_cart(
    payload: CartMergeIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    result = svc.merge_guest_cart(user.id, [item.model_dump() for item in payload.guest_cart])
    return {"message": "Guest cart merged successfully", **result}


@router.put("/{item_id}", response_model=CartResponse, response_model_exclude_none=True)
def update_item(
    item_id: str,
    payload: QuantityIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.update_quantity(user.id, item_id, payload.quantity)
    return {"message": "Cart item updated successfully", "cart": cart}


@router.delete("/{item_id}", response_model=CartResponse, response_model_exclude_none=True)
def remove_item(
    item_id: str,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.remove_item(user.id, item_id)
    return {"message": "Item removed from cart successfully", "cart": cart}


@router.delete("", response_model=CartResponse, response_model_exclude_none=True)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.clear(user.id)
    return {"message": "Cart cleared successfully", "cart": cart}
