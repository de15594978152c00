# kushalwear/data/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, JSON, Numeric, String
from sqlalchemy.orm import relationship

from kushalwear.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    order_number = Column(String(20), nullable=False, unique=True)

    # migawki, nie referencje - pozniejsze zmiany katalogu ich nie dotykaja
    items = Column(JSON, nullable=False)
    shipping = Column(JSON, nullable=False, default=dict)
    payment = Column(JSON, nullable=False, default=dict)
    backing = Column(JSON, nullable=False, default=dict)

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False)
    shipping_cost = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)

    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, processing, shipped, delivered, cancelled
    tracking_number = Column(String(100), nullable=False, default="")
    notes = Column(String(1000), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    user = relationship("UserModel")

    @property
    def item_count(self) -> int:
        return len(self.items or [])
