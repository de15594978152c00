# kushalwear/services/cart_service.py
from typing import Any, Callable, Dict, List

import redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kushalwear.data.models.product import ProductModel
from kushalwear.domain.cart import (
    CartState,
    LineKey,
    clear_items,
    merge_line_item,
    remove_line_item,
    set_line_quantity,
)
from kushalwear.domain.errors import AppError, ItemNotFound, NotFoundError, StaleCartError, ValidationError
from kushalwear.repos.cart_repo import CartRepo
from kushalwear.repos.product_repo import ProductRepo
from kushalwear.services.lock_service import BaseLockService
from kushalwear.utils.retry import conflict_retrying
from kushalwear.utils.settings import CART_LOCK_TTL_SECONDS
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y koszyka.
    query (get, count) tylko odczyt,
    commands (add, update, remove, clear, merge) ida przez _mutate:
    lock na koszyk -> odczyt -> czysta funkcja z domain.cart -> zapis z optimistic locking
    """

    def __init__(self, db: Session, lock_service: BaseLockService, retry_wait=None):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.lock_service = lock_service
        self.retry_wait = retry_wait

    #query - odczyt
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        cart = self.repo.find_or_create(user_id)
        return self._present(self.repo.to_state(cart))

    def count(self, user_id: str) -> int:
        return self.repo.count_items(user_id)

    #commands
    def add_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        size: str | None = None,
        color: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        product = self._available_product(product_id)

        if product.stock < quantity:
            raise ValidationError(f"Only {product.stock} items available in stock")

        logger.info(f"Adding product {product_id} x{quantity} to cart of user {user_id}")
        return self._mutate(
            user_id,
            lambda cart: merge_line_item(
                cart,
                LineKey(product_id, size, (color or {}).get("name")),
                quantity,
                price=product.price,
                color_hex=(color or {}).get("hex"),
            ),
        )

    def update_quantity(self, user_id: str, item_id: str, quantity: int) -> Dict[str, Any]:
        cart = self.repo.get_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        line = next((i for i in cart.items if i.id == item_id), None)
        if line is None:
            raise ItemNotFound()

        if quantity > 0:
            product = self.products.get(line.product_id)
            if product and product.stock < quantity:
                raise ValidationError(f"Only {product.stock} items available in stock")

        return self._mutate(user_id, lambda state: set_line_quantity(state, item_id, quantity))

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        if not self.repo.get_by_user(user_id):
            raise NotFoundError("Cart not found")
        return self._mutate(user_id, lambda state: remove_line_item(state, item_id))

    def clear(self, user_id: str) -> Dict[str, Any]:
        if not self.repo.get_by_user(user_id):
            raise NotFoundError("Cart not found")
        return self._mutate(user_id, clear_items)

    def merge_guest_cart(self, user_id: str, guest_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Scala koszyk goscia z koszykiem uzytkownika (np. po zalogowaniu).
        Pomija produkty nieistniejace, nieaktywne i bez stanu, ilosc przycina
        do stanu magazynu. Blad na jednej pozycji nie przerywa pozostalych,
        nic nie jest wycofywane.
        """
        merged = skipped = 0

        for item in guest_items:
            try:
                product = self.products.get(item["id"])
                if not product or not product.is_active or product.stock <= 0:
                    skipped += 1
                    continue

                quantity = min(item.get("quantity", 1), product.stock)
                color = item.get("color") or {}
                key = LineKey(product.id, item.get("size"), color.get("name"))

                self._mutate(
                    user_id,
                    lambda cart, key=key, quantity=quantity, product=product, color=color: merge_line_item(
                        cart, key, quantity, price=product.price, color_hex=color.get("hex")
                    ),
                    present=False,
                )
                merged += 1
            except (AppError, SQLAlchemyError, redis.RedisError) as e:
                self.repo.rollback()
                skipped += 1
                logger.warning(f"Error merging guest item {item.get('id')} for user {user_id}: {e}")

        logger.info(f"Guest cart merged for user {user_id}: {merged} merged, {skipped} skipped")
        result = self.get_cart(user_id)
        return {"merged": merged, "skipped": skipped, "cart": result}

    def _available_product(self, product_id: str) -> ProductModel:
        product = self.products.get(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.is_active:
            raise ValidationError("Product is not available")
        return product

    def _mutate(self, user_id: str, change: Callable[[CartState], CartState], present: bool = True):
        # Redis lock na koszyk + optimistic locking na wersje
        # przegrany wyscig -> rollback i powtorka calego read-modify-write
        for attempt in conflict_retrying(StaleCartError, wait=self.retry_wait):
            with attempt:
                with self.lock_service.hold(f"cart:{user_id}:lock", ttl=CART_LOCK_TTL_SECONDS):
                    cart = self.repo.find_or_create(user_id)
                    state = change(self.repo.to_state(cart))
                    self.repo.save_state(cart, state)

        if present:
            return self.get_cart(user_id)
        return None

    def _present(self, state: CartState) -> Dict[str, Any]:
        products = self.products.get_many(i.product_id for i in state.items)
        items = []
        for i in state.items:
            p = products.get(i.product_id)
            items.append(
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "product": (
                        {
                            "id": p.id,
                            "name": p.name,
                            "price": p.price,
                            "main_image": p.main_image,
                            "stock": p.stock,
                            "is_active": p.is_active,
                        }
                        if p
                        else None
                    ),
                    "quantity": i.quantity,
                    "size": i.size,
                    "color": {"name": i.color_name, "hex": i.color_hex} if i.color_name else None,
                    "price": i.price,
                    "subtotal": i.subtotal,
                    "added_at": i.added_at,
                }
            )

        return {
            "id": state.id,
            "items": items,
            "total_items": state.total_items,
            "total_price": state.total_price,
            "last_updated": state.last_updated,
        }
