# kushalwear/domain/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from kushalwear.domain.order_status import OrderStatus

Size = Literal["XS", "S", "M", "L", "XL", "XXL", "XXXL"]
Category = Literal["men", "women", "unisex", "accessories"]
SortOption = Literal["price_asc", "price_desc", "name_asc", "name_desc", "newest", "rating"]

_PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password(value: str) -> str:
    if not _PASSWORD_RE.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return value


class CamelModel(BaseModel):
    """JSON w camelCase, w Pythonie snake_case (obie nazwy akceptowane na wejsciu)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(CamelModel):
    message: str
    success: Optional[bool] = None


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool
    limit: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_count=total,
            has_next=page < total_pages,
            has_prev=page > 1,
            limit=limit,
        )


class Color(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    hex: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


# ---------------------------------------------------------------- auth / users

class Address(CamelModel):
    street: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=50)
    state: Optional[str] = Field(None, max_length=50)
    zip_code: Optional[str] = Field(None, max_length=10)
    country: Optional[str] = Field(None, max_length=50)


class SignupIn(CamelModel):
    """Schema dla rejestracji."""

    name: str = Field(..., min_length=2, max_length=50, description="Imie uzytkownika")
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password(value)


class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdateIn(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9 ()\-]{7,20}$")
    address: Optional[Address] = None
    avatar: Optional[str] = Field(None, max_length=500, pattern=r"^https?://")


class ChangePasswordIn(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password(value)


class UserAdminUpdateIn(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    role: Optional[Literal["user", "admin"]] = None
    is_active: Optional[bool] = None


class UserOut(CamelModel):
    """Publiczny profil, bez hasla."""

    id: str
    name: str
    email: str
    role: str
    is_active: bool
    phone: Optional[str] = None
    address: Optional[Address] = None
    avatar: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserBrief(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None


class AuthOut(CamelModel):
    message: str
    token: str
    user: UserOut


class UserResponse(CamelModel):
    message: Optional[str] = None
    user: UserOut


class UserListOut(CamelModel):
    users: List[UserOut]
    pagination: Pagination


# ---------------------------------------------------------------- products

class Rating(CamelModel):
    average: float = 0.0
    count: int = 0


class Discount(CamelModel):
    percentage: float = 0.0
    valid_until: Optional[datetime] = None


class ReviewUser(CamelModel):
    id: str
    name: str
    avatar: Optional[str] = None


class ReviewOut(CamelModel):
    id: int
    user: Optional[ReviewUser] = None
    rating: int
    comment: str = ""
    date: datetime


class ProductSummaryOut(CamelModel):
    id: str
    name: str
    price: float
    main_image: str
    category: str
    rating: Rating
    is_featured: bool = False
    discount: Discount
    discounted_price: float
    has_discount: bool


class ProductOut(ProductSummaryOut):
    description: str
    original_price: Optional[float] = None
    subcategory: Optional[str] = None
    images: List[str] = []
    sizes: List[str] = []
    colors: List[Color] = []
    stock: int
    sku: str
    brand: Optional[str] = None
    material: Optional[str] = None
    care: Optional[str] = None
    tags: List[str] = []
    is_active: bool
    weight: Optional[float] = None
    dimensions: Optional[Dict[str, float]] = None
    reviews: List[ReviewOut] = []
    created_at: datetime


class ProductListOut(CamelModel):
    products: List[ProductSummaryOut]
    pagination: Optional[Pagination] = None
    category: Optional[str] = None
    query: Optional[str] = None


class ProductResponse(CamelModel):
    message: Optional[str] = None
    product: ProductOut


class ReviewIn(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=500)


# ---------------------------------------------------------------- cart

class ItemIn(CamelModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(1, ge=1, description="Ilosc produktu (musi byc >= 1)")
    size: Optional[Size] = None
    color: Optional[Color] = None


class QuantityIn(CamelModel):
    # 0 usuwa pozycje
    quantity: int = Field(..., ge=0)


class GuestCartItem(CamelModel):
    id: str = Field(..., min_length=1, description="ID produktu")
    quantity: int = Field(1, ge=1)
    size: Optional[Size] = None
    color: Optional[Color] = None


class CartMergeIn(CamelModel):
    guest_cart: List[GuestCartItem]


class CartProduct(CamelModel):
    id: str
    name: str
    price: float
    main_image: str
    stock: int
    is_active: bool


class CartItemOut(CamelModel):
    """Schema dla produktu w koszyku (response)."""

    id: str
    product_id: str
    product: Optional[CartProduct] = None
    quantity: int
    size: Optional[str] = None
    color: Optional[Color] = None
    price: float
    subtotal: float
    added_at: datetime


class CartOut(CamelModel):
    """Schema dla koszyka (response)."""

    id: str
    items: List[CartItemOut]
    total_items: int
    total_price: float
    last_updated: Optional[datetime] = None


class CartResponse(CamelModel):
    message: Optional[str] = None
    cart: CartOut


class CartMergeOut(CartResponse):
    merged: int
    skipped: int


class CartCountOut(CamelModel):
    count: int


# ---------------------------------------------------------------- wishlist

class WishlistAddIn(CamelModel):
    product_id: str = Field(..., min_length=1)
    size: Optional[Size] = None
    color: Optional[Color] = None


class MoveToCartIn(CamelModel):
    quantity: int = Field(1, ge=1)


class WishlistProduct(CamelModel):
    id: str
    name: str
    price: float
    main_image: str
    category: str
    rating: Rating
    discount: Discount
    is_active: bool


class WishlistEntryOut(CamelModel):
    product: WishlistProduct
    selected_size: Optional[str] = None
    selected_color: Optional[Color] = None
    added_at: Optional[datetime] = None


class WishlistOut(CamelModel):
    id: str
    products: List[WishlistEntryOut]
    total_items: int


class WishlistResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    wishlist: WishlistOut


class WishlistAddOut(CamelModel):
    success: bool = True
    message: str
    wishlist_item: WishlistEntryOut


class WishlistCheckOut(CamelModel):
    success: bool = True
    in_wishlist: bool


class MoveToCartOut(CamelModel):
    success: bool = True
    message: str
    product_id: str
    quantity: int
    cart: CartOut


# ---------------------------------------------------------------- orders

class OrderItemIn(CamelModel):
    id: Union[int, str]
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    image: str = ""
    quantity: int = Field(..., ge=1)


class ShippingIn(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class PaymentIn(CamelModel):
    method: Literal["card", "paypal", "bank"]
    card_number: str = ""
    card_expiry: str = ""
    card_name: str = ""


class Backing(CamelModel):
    newsletter: bool = False
    reviews: bool = False
    updates: bool = False
    special: bool = False


class OrderCreate(CamelModel):
    """Schema dla tworzenia zamowienia. Sumy zapisywane tak jak przyszly."""

    items: List[OrderItemIn] = Field(..., min_length=1)
    shipping: Optional[ShippingIn] = None
    payment: Optional[PaymentIn] = None
    backing: Backing = Field(default_factory=Backing)
    subtotal: Decimal = Field(..., ge=0)
    tax: Decimal = Field(..., ge=0)
    shipping_cost: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)


class PaymentOut(CamelModel):
    method: Optional[str] = None
    card_name: Optional[str] = None
    card_last4: Optional[str] = None


class OrderOut(CamelModel):
    """Schema dla zamowienia (response)."""

    id: str
    order_number: str
    user: Optional[UserBrief] = None
    items: List[OrderItemIn]
    shipping: Optional[ShippingIn] = None
    payment: Optional[PaymentOut] = None
    backing: Optional[Backing] = None
    subtotal: float
    tax: float
    shipping_cost: float
    total: float
    status: OrderStatus
    tracking_number: str = ""
    notes: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None


class OrderResponse(CamelModel):
    message: Optional[str] = None
    order: OrderOut


class OrderListOut(CamelModel):
    orders: List[OrderOut]
    pagination: Pagination


class MyOrderOut(CamelModel):
    id: str
    order_number: str
    items: List[OrderItemIn]
    total: float
    status: OrderStatus
    created_at: datetime
    item_count: int


class MyOrdersOut(CamelModel):
    orders: List[MyOrderOut]


class OrderStatusIn(CamelModel):
    status: OrderStatus
    tracking_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=1000)


class RecentOrder(CamelModel):
    order_number: str
    user: str
    total: float
    status: OrderStatus
    created_at: datetime


class OrderSummary(CamelModel):
    total_orders: int
    total_revenue: float
    orders_by_status: Dict[str, int]
    recent_orders: List[RecentOrder]


class OrderStatsOut(CamelModel):
    summary: OrderSummary


# ---------------------------------------------------------------- health

class HealthOut(CamelModel):
    status: str
    message: str
    database: str
    environment: str
    version: str
    timestamp: datetime
    uptime_seconds: float
