# kushalwear/data/models/cart_item.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from kushalwear.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(String(32), primary_key=True)
    cart_id = Column(String(32), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(32), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    # "" zamiast NULL, inaczej unique constraint nie lapie duplikatow bez rozmiaru/koloru
    size = Column(String(8), nullable=False, default="")
    color_name = Column(String(50), nullable=False, default="")
    color_hex = Column(String(7), nullable=True)

    added_at = Column(DateTime(timezone=True), nullable=False)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "size", "color_name", name="u_cart_line"),
    )
