# kushalwear/domain/cart.py
"""
Czyste funkcje na koszyku, niezalezne od bazy.

Koszyk to lista pozycji (LineItem) z indeksem po kluczu tozsamosci
LineKey(product_id, size, color_name). Kazda funkcja zwraca NOWY stan,
wejscie nie jest modyfikowane.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, NamedTuple, Optional

from kushalwear.domain.errors import ItemNotFound, ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LineKey(NamedTuple):
    product_id: str
    size: Optional[str] = None
    color_name: Optional[str] = None


@dataclass
class LineItem:
    product_id: str
    quantity: int
    price: Decimal
    size: Optional[str] = None
    color_name: Optional[str] = None
    color_hex: Optional[str] = None
    added_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def key(self) -> LineKey:
        return LineKey(self.product_id, self.size, self.color_name)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class CartState:
    user_id: str
    items: List[LineItem] = field(default_factory=list)
    id: Optional[str] = None
    last_updated: Optional[datetime] = None

    def index_of(self, key: LineKey) -> Optional[int]:
        positions = {item.key: i for i, item in enumerate(self.items)}
        return positions.get(key)

    def position(self, item_id: str) -> Optional[int]:
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        return None

    #wartosci liczone przy odczycie, nigdy nie zapisywane
    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0.00"))


def _copy(cart: CartState, now: datetime | None) -> CartState:
    return replace(
        cart,
        items=[replace(item) for item in cart.items],
        last_updated=now or utcnow(),
    )


def merge_line_item(
    cart: CartState,
    key: LineKey,
    delta: int,
    *,
    price: Decimal,
    color_hex: str | None = None,
    now: datetime | None = None,
) -> CartState:
    """
    Dodaje delta sztuk pozycji o kluczu key.
    Jesli pozycja o tym kluczu juz jest - zwieksza ilosc (bez gornego limitu,
    stan magazynu sprawdza wolajacy), w przeciwnym razie dopisuje nowa
    pozycje z migawka ceny.
    """
    if delta < 1:
        raise ValidationError("Quantity must be at least 1")

    updated = _copy(cart, now)
    index = updated.index_of(key)

    if index is not None:
        updated.items[index].quantity += delta
    else:
        updated.items.append(
            LineItem(
                product_id=key.product_id,
                quantity=delta,
                price=Decimal(str(price)),
                size=key.size,
                color_name=key.color_name,
                color_hex=color_hex if key.color_name else None,
                added_at=updated.last_updated,
            )
        )
    return updated


def remove_line_item(cart: CartState, item_id: str, now: datetime | None = None) -> CartState:
    if cart.position(item_id) is None:
        raise ItemNotFound()

    updated = _copy(cart, now)
    updated.items = [item for item in updated.items if item.id != item_id]
    return updated


def set_line_quantity(
    cart: CartState,
    item_id: str,
    quantity: int,
    now: datetime | None = None,
) -> CartState:
    # <= 0 dziala jak usuniecie, bez scalania z innymi pozycjami
    if quantity <= 0:
        return remove_line_item(cart, item_id, now)

    index = cart.position(item_id)
    if index is None:
        raise ItemNotFound()

    updated = _copy(cart, now)
    updated.items[index].quantity = quantity
    return updated


def clear_items(cart: CartState, now: datetime | None = None) -> CartState:
    updated = _copy(cart, now)
    updated.items = []
    return updated
