# kushalwear/data/models/product.py
import random
import string
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from kushalwear.data.database import Base

CATEGORIES = ("men", "women", "unisex", "accessories")
SIZES = ("XS", "S", "M", "L", "XL", "XXL", "XXXL")


def _now():
    return datetime.now(timezone.utc)


def _generate_sku(context):
    category = (context.get_current_parameters().get("category") or "item").upper()
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"KW-{category}-{int(time.time() * 1000)}-{suffix}"


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(1000), nullable=False)

    price = Column(Numeric(10, 2), nullable=False, index=True)
    original_price = Column(Numeric(10, 2), nullable=True)

    category = Column(String(20), nullable=False, index=True)
    subcategory = Column(String(100), nullable=True)

    images = Column(JSON, nullable=False, default=list)
    main_image = Column(String(500), nullable=False, default="")
    sizes = Column(JSON, nullable=False, default=list)
    colors = Column(JSON, nullable=False, default=list)  # [{"name": ..., "hex": ...}]

    stock = Column(Integer, nullable=False, default=0)
    sku = Column(String(64), nullable=False, unique=True, default=_generate_sku)
    brand = Column(String(100), nullable=True)
    material = Column(String(100), nullable=True)
    care = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    # liczone z recenzji przy kazdym zapisie recenzji
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)

    discount_percentage = Column(Float, nullable=False, default=0.0)
    discount_valid_until = Column(DateTime(timezone=True), nullable=True)

    weight = Column(Float, nullable=True)
    dimensions = Column(JSON, nullable=True)  # length, width, height

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    reviews = relationship(
        "ReviewModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ReviewModel.created_at",
    )

    @property
    def discounted_price(self) -> Decimal:
        price = Decimal(str(self.price))
        if self.discount_percentage and self.discount_percentage > 0:
            pct = Decimal(str(self.discount_percentage))
            return (price - price * pct / Decimal(100)).quantize(Decimal("0.01"))
        return price

    @property
    def has_discount(self) -> bool:
        if not self.discount_percentage:
            return False
        valid_until = self.discount_valid_until
        if valid_until is not None:
            # sqlite zwraca naiwne daty
            if valid_until.tzinfo is None:
                valid_until = valid_until.replace(tzinfo=timezone.utc)
            if _now() > valid_until:
                return False
        return True

    def recompute_rating(self) -> None:
        if not self.reviews:
            self.rating_average = 0.0
            self.rating_count = 0
            return
        total = sum(r.rating for r in self.reviews)
        self.rating_average = total / len(self.reviews)
        self.rating_count = len(self.reviews)


class ReviewModel(Base):
    __tablename__ = "product_reviews"

    id = Column(Integer, primary_key=True)
    product_id = Column(String(32), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False)

    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    product = relationship("ProductModel", back_populates="reviews")
    user = relationship("UserModel")

    __table_args__ = (UniqueConstraint("product_id", "user_id", name="u_review_product_user"),)
