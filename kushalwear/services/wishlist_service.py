# kushalwear/services/wishlist_service.py
from typing import Any, Callable, Dict

from sqlalchemy.orm import Session

from kushalwear.data.models.product import ProductModel
from kushalwear.domain.errors import NotFoundError, StaleWishlistError
from kushalwear.domain.wishlist import WishlistEntry, WishlistState, clear_entries, remove_entry, upsert_entry
from kushalwear.repos.product_repo import ProductRepo
from kushalwear.repos.wishlist_repo import WishlistRepo
from kushalwear.services.cart_service import CartService
from kushalwear.services.lock_service import BaseLockService
from kushalwear.utils.retry import conflict_retrying
from kushalwear.utils.settings import CART_LOCK_TTL_SECONDS
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


def _wishlist_product(p: ProductModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "price": p.price,
        "main_image": p.main_image,
        "category": p.category,
        "rating": {"average": p.rating_average, "count": p.rating_count},
        "discount": {"percentage": p.discount_percentage, "valid_until": p.discount_valid_until},
        "is_active": p.is_active,
    }


def _entry(entry: WishlistEntry, product: ProductModel) -> Dict[str, Any]:
    return {
        "product": _wishlist_product(product),
        "selected_size": entry.selected_size,
        "selected_color": entry.selected_color,
        "added_at": entry.added_at,
    }


class WishlistService:
    """
    Use case'y listy zyczen. Zapisy (add, remove, clear, move) ida przez
    _mutate: lock na liste -> odczyt -> czysta funkcja z domain.wishlist -> zapis,
    powtarzane gdy zapis przegral wyscig.
    """

    def __init__(
        self,
        db: Session,
        cart_service: CartService,
        lock_service: BaseLockService,
        retry_wait=None,
    ):
        self.repo = WishlistRepo(db)
        self.products = ProductRepo(db)
        self.cart_service = cart_service
        self.lock_service = lock_service
        self.retry_wait = retry_wait

    def get_wishlist(self, user_id: str) -> Dict[str, Any]:
        wishlist = self.repo.find_or_create(user_id)
        state = self.repo.to_state(wishlist)
        products = self.products.get_many(e.product_id for e in state.entries)

        #nieaktywne i usuniete produkty nie sa pokazywane
        visible = [
            _entry(e, products[e.product_id])
            for e in state.entries
            if e.product_id in products and products[e.product_id].is_active
        ]
        return {
            "wishlist": {
                "id": state.id,
                "products": visible,
                "total_items": len(visible),
            }
        }

    def add_product(
        self,
        user_id: str,
        product_id: str,
        size: str | None = None,
        color: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        product = self.products.get(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found or unavailable")

        state = self._mutate(user_id, lambda wl: upsert_entry(wl, product_id, size, color))
        logger.info(f"Product {product_id} saved to wishlist of user {user_id}")

        return {
            "message": "Product added to wishlist successfully",
            "wishlist_item": _entry(state.entry(product_id), product),
        }

    def remove_product(self, user_id: str, product_id: str) -> Dict[str, Any]:
        # brak listy albo produktu to no-op
        self._mutate(user_id, lambda wl: remove_entry(wl, product_id), create=False)
        logger.info(f"Product {product_id} removed from wishlist of user {user_id}")
        return {"message": "Product removed from wishlist successfully"}

    def has_product(self, user_id: str, product_id: str) -> bool:
        wishlist = self.repo.get_by_user(user_id)
        if not wishlist:
            return False
        return self.repo.to_state(wishlist).has_product(product_id)

    def clear(self, user_id: str) -> Dict[str, Any]:
        if self._mutate(user_id, clear_entries, create=False) is None:
            raise NotFoundError("Wishlist not found")
        return {"message": "Wishlist cleared successfully"}

    def move_to_cart(self, user_id: str, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        """Dodaje wpis do koszyka (z wybranym rozmiarem/kolorem) i usuwa go z listy."""
        wishlist = self.repo.get_by_user(user_id)
        entry = self.repo.to_state(wishlist).entry(product_id) if wishlist else None
        if entry is None:
            raise NotFoundError("Product not found in wishlist")

        cart = self.cart_service.add_item(
            user_id,
            product_id,
            quantity,
            size=entry.selected_size,
            color=entry.selected_color,
        )
        self.remove_product(user_id, product_id)

        return {
            "message": "Product moved to cart successfully",
            "product_id": product_id,
            "quantity": quantity,
            "cart": cart,
        }

    def _mutate(
        self,
        user_id: str,
        change: Callable[[WishlistState], WishlistState],
        create: bool = True,
    ) -> WishlistState | None:
        # create=False: brak listy -> None, nic nie jest zakladane
        state = None
        for attempt in conflict_retrying(StaleWishlistError, wait=self.retry_wait):
            with attempt:
                with self.lock_service.hold(f"wishlist:{user_id}:lock", ttl=CART_LOCK_TTL_SECONDS):
                    if create:
                        wishlist = self.repo.find_or_create(user_id)
                    else:
                        wishlist = self.repo.get_by_user(user_id)
                    if wishlist is None:
                        return None
                    state = change(self.repo.to_state(wishlist))
                    self.repo.save_state(wishlist, state)
        return state
