# kushalwear/data/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from kushalwear.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    # jeden koszyk na uzytkownika, czyszczony a nie usuwany
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, unique=True)

    version = Column(Integer, nullable=False, default=1)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=_now)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.position",
    )
