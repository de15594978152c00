# kushalwear/repos/cart_repo.py
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from kushalwear.data.models.cart import CartModel
from kushalwear.data.models.cart_item import CartItemModel
from kushalwear.domain.cart import CartState, LineItem
from kushalwear.domain.errors import StaleCartError
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id)
            .options(selectinload(CartModel.items))
        ).scalar_one_or_none()

    def find_or_create(self, user_id: str) -> CartModel:
        cart = self.get_by_user(user_id)
        if cart:
            return cart

        #unique na user_id - rownolegle pierwsze wejscie przegrywa insert i czyta istniejacy
        try:
            self.db.add(CartModel(user_id=user_id))
            self.db.commit()
            logger.info(f"Created cart for user {user_id}")
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Cart for user {user_id} created concurrently, re-fetching")
        return self.get_by_user(user_id)

    @staticmethod
    def to_state(cart: CartModel) -> CartState:
        return CartState(
            id=cart.id,
            user_id=cart.user_id,
            last_updated=cart.last_updated,
            items=[
                LineItem(
                    id=i.id,
                    product_id=i.product_id,
                    quantity=i.quantity,
                    price=i.price,
                    size=i.size or None,
                    color_name=i.color_name or None,
                    color_hex=i.color_hex,
                    added_at=i.added_at,
                )
                for i in cart.items
            ],
        )

    def save_state(self, cart: CartModel, state: CartState) -> None:
        """
        Synchronizuje wiersze pozycji ze stanem i podbija wersje koszyka.
        Optimistic locking: update ... where version = stara wersja,
        0 wierszy albo naruszenie unique -> StaleCartError.
        """
        old_version = cart.version
        rows = {row.id: row for row in cart.items}
        wanted = {line.id for line in state.items}

        for row_id, row in rows.items():
            if row_id not in wanted:
                cart.items.remove(row)

        for position, line in enumerate(state.items):
            row = rows.get(line.id)
            if row is None:
                cart.items.append(
                    CartItemModel(
                        id=line.id,
                        product_id=line.product_id,
                        position=position,
                        quantity=line.quantity,
                        price=line.price,
                        size=line.size or "",
                        color_name=line.color_name or "",
                        color_hex=line.color_hex,
                        added_at=line.added_at,
                    )
                )
            else:
                row.position = position
                row.quantity = line.quantity
                row.price = line.price

        try:
            self.db.flush()
            rowcount = self.db.execute(
                update(CartModel)
                .where(CartModel.id == cart.id, CartModel.version == old_version)
                .values(version=old_version + 1, last_updated=state.last_updated)
                .execution_options(synchronize_session=False)
            ).rowcount
        except IntegrityError:
            self.db.rollback()
            raise StaleCartError()

        if rowcount == 0:
            self.db.rollback()
            raise StaleCartError()

        self.db.commit()
        logger.info(f"Cart {cart.id} saved, version {old_version} -> {old_version + 1}")

    def count_items(self, user_id: str) -> int:
        cart = self.get_by_user(user_id)
        if not cart:
            return 0
        return sum(i.quantity for i in cart.items)

    def rollback(self):
        self.db.rollback()
