# kushalwear/repos/order_repo.py
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from kushalwear.data.models.order import OrderModel


class OrderNumberTaken(Exception):
    pass


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        """Insert; kolizja order_number -> OrderNumberTaken, inne bledy dalej."""
        order_number = order.order_number
        self.db.add(order)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self.order_number_exists(order_number):
                raise OrderNumberTaken(order_number)
            raise
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.id == order_id).options(joinedload(OrderModel.user))
        ).scalar_one_or_none()

    def order_number_exists(self, order_number: str) -> bool:
        return self.db.execute(
            select(func.count()).select_from(OrderModel).where(OrderModel.order_number == order_number)
        ).scalar_one() > 0

    def count_created_between(self, start: datetime, end: datetime) -> int:
        return self.db.execute(
            select(func.count())
            .select_from(OrderModel)
            .where(OrderModel.created_at >= start, OrderModel.created_at < end)
        ).scalar_one()

    def list_orders(self, page: int, limit: int, status: str | None = None, user_id: str | None = None):
        filters = []
        if status:
            filters.append(OrderModel.status == status)
        if user_id:
            filters.append(OrderModel.user_id == user_id)

        total = self.db.execute(
            select(func.count()).select_from(OrderModel).where(*filters)
        ).scalar_one()
        orders = self.db.execute(
            select(OrderModel)
            .where(*filters)
            .options(joinedload(OrderModel.user))
            .order_by(OrderModel.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return orders, total

    def list_by_user(self, user_id: str) -> list[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc())
        ).scalars().all()

    def recent(self, limit: int = 5) -> list[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .options(joinedload(OrderModel.user))
            .order_by(OrderModel.created_at.desc())
            .limit(limit)
        ).scalars().all()

    def count_all(self) -> int:
        return self.db.execute(select(func.count()).select_from(OrderModel)).scalar_one()

    def revenue(self, exclude_status: str = "cancelled"):
        return self.db.execute(
            select(func.coalesce(func.sum(OrderModel.total), 0)).where(OrderModel.status != exclude_status)
        ).scalar_one()

    def count_by_status(self) -> dict[str, int]:
        rows = self.db.execute(
            select(OrderModel.status, func.count()).group_by(OrderModel.status)
        ).all()
        return {status: count for status, count in rows}

    def update_order_status(
        self,
        order: OrderModel,
        status: str,
        tracking_number: str | None = None,
        notes: str | None = None,
    ) -> OrderModel:
        order.status = status
        if tracking_number is not None:
            order.tracking_number = tracking_number
        if notes is not None:
            order.notes = notes
        self.db.commit()
        return self.get_order(order.id)

    def rollback(self):
        self.db.rollback()
