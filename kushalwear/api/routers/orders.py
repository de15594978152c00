# kushalwear/api/routers/orders.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from kushalwear.api.deps import get_current_user, require_admin
from kushalwear.data.database import get_db
from kushalwear.data.models.user import UserModel
from kushalwear.domain.order_status import OrderStatus
from kushalwear.domain.schemas import (
    MyOrdersOut,
    OrderCreate,
    OrderListOut,
    OrderResponse,
    OrderStatsOut,
    OrderStatusIn,
)
from kushalwear.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderResponse, status_code=201, response_model_exclude_none=True)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z koszyka przeslanego przez klienta.
    Numer zamowienia nadawany przy zapisie.
    """
    return get_service(db).create_order(user, payload)


@router.get("", response_model=OrderListOut, response_model_exclude_none=True)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[OrderStatus] = Query(None),
    user_id: Optional[str] = Query(None, alias="userId"),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(
        page=page,
        limit=limit,
        status=status.value if status else None,
        user_id=user_id,
    )


@router.get("/my-orders", response_model=MyOrdersOut)
def my_orders(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).my_orders(user)


@router.get("/stats/summary", response_model=OrderStatsOut)
def order_stats(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).stats()


@router.get("/{order_id}", response_model=OrderResponse, response_model_exclude_none=True)
def get_order(
    order_id: str,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegoly zamowienia (wlasciciel albo admin).
    """
    return get_service(db).get_order(order_id, user)


@router.put("/{order_id}/status", response_model=OrderResponse, response_model_exclude_none=True)
def update_order_status(
    order_id: str,
    payload: OrderStatusIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_status(
        order_id,
        payload.status.value,
        tracking_number=payload.tracking_number,
        notes=payload.notes,
    )
