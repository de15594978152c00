# kushalwear/services/order_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from kushalwear.data.models.order import OrderModel
from kushalwear.data.models.user import UserModel
from kushalwear.domain.errors import ForbiddenError, NotFoundError
from kushalwear.domain.order_status import check_transition
from kushalwear.domain.schemas import OrderCreate, Pagination
from kushalwear.repos.order_repo import OrderRepo
from kushalwear.services.order_number_service import OrderNumberGenerator
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


def _mask_payment(payment: Dict[str, Any] | None) -> Dict[str, Any]:
    # pelny numer karty nie jest zapisywany
    if not payment:
        return {}
    card_number = "".join(ch for ch in payment.get("card_number", "") if ch.isdigit())
    return {
        "method": payment["method"],
        "card_name": payment.get("card_name", ""),
        "card_expiry": payment.get("card_expiry", ""),
        "card_last4": card_number[-4:] if card_number else "",
    }


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    user = order.user
    return {
        "id": order.id,
        "order_number": order.order_number,
        "user": (
            {"id": user.id, "name": user.name, "email": user.email, "phone": user.phone}
            if user
            else None
        ),
        "items": order.items,
        "shipping": order.shipping or None,
        "payment": order.payment or None,
        "backing": order.backing or None,
        "subtotal": order.subtotal,
        "tax": order.tax,
        "shipping_cost": order.shipping_cost,
        "total": order.total,
        "status": order.status,
        "tracking_number": order.tracking_number,
        "notes": order.notes,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Zamowienie to zamrozona migawka koszyka z checkoutu, zmienia sie tylko
    status, tracking i notatki.
    """

    def __init__(self, db: Session, number_generator: OrderNumberGenerator | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.numbers = number_generator or OrderNumberGenerator(self.repo)

    def create_order(self, user: UserModel, payload: OrderCreate) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamowienia.

        1. Sumy zapisywane tak jak przyszly (niespojnosc tylko logowana)
        2. Numer nadawany raz, przy pierwszym zapisie
        """
        expected = payload.subtotal + payload.tax + payload.shipping_cost
        if expected != payload.total:
            logger.warning(
                f"Order total {payload.total} for user {user.id} differs from "
                f"subtotal + tax + shipping = {expected}"
            )

        items = [item.model_dump(mode="json") for item in payload.items]
        shipping = payload.shipping.model_dump(mode="json") if payload.shipping else {}
        payment = _mask_payment(payload.payment.model_dump(mode="json") if payload.payment else None)
        backing = payload.backing.model_dump(mode="json")

        def build(order_number: str) -> OrderModel:
            return OrderModel(
                user_id=user.id,
                order_number=order_number,
                items=items,
                shipping=shipping,
                payment=payment,
                backing=backing,
                subtotal=payload.subtotal,
                tax=payload.tax,
                shipping_cost=payload.shipping_cost,
                total=payload.total,
                status="pending",
            )

        created = self.numbers.create(build)
        logger.info(f"Order {created.order_number} created for user {user.id}")

        return {
            "message": "Order created successfully",
            "order": order_to_dict(self.repo.get_order(created.id)),
        }

    def get_order(self, order_id: str, user: UserModel) -> Dict[str, Any]:
        """Use Case: Pobranie zamowienia (wlasciciel albo admin)."""
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if not user.is_admin and order.user_id != user.id:
            raise ForbiddenError("Access denied")

        return {"order": order_to_dict(order)}

    def my_orders(self, user: UserModel) -> Dict[str, Any]:
        orders = self.repo.list_by_user(user.id)
        return {
            "orders": [
                {
                    "id": o.id,
                    "order_number": o.order_number,
                    "items": o.items,
                    "total": o.total,
                    "status": o.status,
                    "created_at": o.created_at,
                    "item_count": o.item_count,
                }
                for o in orders
            ]
        }

    def list_orders(
        self,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        user_id: str | None = None,
    ) -> Dict[str, Any]:
        orders, total = self.repo.list_orders(page, limit, status=status, user_id=user_id)
        return {
            "orders": [order_to_dict(o) for o in orders],
            "pagination": Pagination.build(page, limit, total),
        }

    def stats(self) -> Dict[str, Any]:
        recent = self.repo.recent(5)
        return {
            "summary": {
                "total_orders": self.repo.count_all(),
                "total_revenue": Decimal(str(self.repo.revenue())),
                "orders_by_status": self.repo.count_by_status(),
                "recent_orders": [
                    {
                        "order_number": o.order_number,
                        "user": o.user.name if o.user else "Unknown User",
                        "total": o.total,
                        "status": o.status,
                        "created_at": o.created_at,
                    }
                    for o in recent
                ],
            }
        }

    def update_status(
        self,
        order_id: str,
        status: str,
        tracking_number: str | None = None,
        notes: str | None = None,
    ) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        new_status = check_transition(order.status, status)
        previous = order.status
        updated = self.repo.update_order_status(order, new_status.value, tracking_number, notes)
        logger.info(f"Order {updated.order_number} status {previous} -> {new_status.value}")

        return {"message": "Order status updated successfully", "order": order_to_dict(updated)}
