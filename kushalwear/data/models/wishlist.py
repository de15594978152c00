# kushalwear/data/models/wishlist.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import relationship

from kushalwear.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class WishlistModel(Base):
    __tablename__ = "wishlists"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    entries = relationship(
        "WishlistItemModel",
        back_populates="wishlist",
        cascade="all, delete-orphan",
        order_by="WishlistItemModel.id",
    )


class WishlistItemModel(Base):
    __tablename__ = "wishlist_items"

    id = Column(Integer, primary_key=True)
    wishlist_id = Column(String(32), ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(32), nullable=False, index=True)

    selected_size = Column(String(8), nullable=True)
    selected_color = Column(JSON, nullable=True)  # {"name": ..., "hex": ...}
    added_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    wishlist = relationship("WishlistModel", back_populates="entries")

    __table_args__ = (UniqueConstraint("wishlist_id", "product_id", name="u_wishlist_product"),)
