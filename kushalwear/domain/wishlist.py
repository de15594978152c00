# kushalwear/domain/wishlist.py
"""
Lista zyczen jako zbior wpisow unikalnych po product_id.
Ponowne dodanie produktu to upsert, nie dopisanie.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional

from kushalwear.domain.cart import utcnow


@dataclass
class WishlistEntry:
    product_id: str
    selected_size: Optional[str] = None
    selected_color: Optional[Dict[str, str]] = None
    added_at: datetime = field(default_factory=utcnow)


@dataclass
class WishlistState:
    user_id: str
    entries: List[WishlistEntry] = field(default_factory=list)
    id: Optional[str] = None

    def index_of(self, product_id: str) -> Optional[int]:
        positions = {entry.product_id: i for i, entry in enumerate(self.entries)}
        return positions.get(product_id)

    def has_product(self, product_id: str) -> bool:
        return self.index_of(product_id) is not None

    def entry(self, product_id: str) -> Optional[WishlistEntry]:
        index = self.index_of(product_id)
        return self.entries[index] if index is not None else None


def upsert_entry(
    wishlist: WishlistState,
    product_id: str,
    size: str | None = None,
    color: Dict[str, str] | None = None,
    now: datetime | None = None,
) -> WishlistState:
    """Nadpisuje tylko pola podane jawnie, zawsze odswieza added_at."""
    now = now or utcnow()
    updated = replace(wishlist, entries=[replace(e) for e in wishlist.entries])
    index = updated.index_of(product_id)

    if index is not None:
        entry = updated.entries[index]
        if size:
            entry.selected_size = size
        if color:
            entry.selected_color = dict(color)
        entry.added_at = now
    else:
        updated.entries.append(
            WishlistEntry(
                product_id=product_id,
                selected_size=size,
                selected_color=dict(color) if color else None,
                added_at=now,
            )
        )
    return updated


def remove_entry(wishlist: WishlistState, product_id: str) -> WishlistState:
    # brak produktu to no-op
    return replace(
        wishlist,
        entries=[replace(e) for e in wishlist.entries if e.product_id != product_id],
    )


def clear_entries(wishlist: WishlistState) -> WishlistState:
    return replace(wishlist, entries=[])
