# kushalwear/repos/wishlist_repo.py
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from kushalwear.data.models.wishlist import WishlistItemModel, WishlistModel
from kushalwear.domain.errors import StaleWishlistError
from kushalwear.domain.wishlist import WishlistEntry, WishlistState
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> WishlistModel | None:
        return self.db.execute(
            select(WishlistModel)
            .where(WishlistModel.user_id == user_id)
            .options(selectinload(WishlistModel.entries))
        ).scalar_one_or_none()

    def find_or_create(self, user_id: str) -> WishlistModel:
        wishlist = self.get_by_user(user_id)
        if wishlist:
            return wishlist

        # najpierw insert, przy naruszeniu unique(user_id) czytamy istniejaca
        try:
            self.db.add(WishlistModel(user_id=user_id))
            self.db.commit()
            logger.info(f"Created wishlist for user {user_id}")
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Wishlist for user {user_id} created concurrently, re-fetching")
        return self.get_by_user(user_id)

    @staticmethod
    def to_state(wishlist: WishlistModel) -> WishlistState:
        return WishlistState(
            id=wishlist.id,
            user_id=wishlist.user_id,
            entries=[
                WishlistEntry(
                    product_id=e.product_id,
                    selected_size=e.selected_size,
                    selected_color=e.selected_color,
                    added_at=e.added_at,
                )
                for e in wishlist.entries
            ],
        )

    def save_state(self, wishlist: WishlistModel, state: WishlistState) -> None:
        """
        Synchronizuje wpisy ze stanem. Wpis usuniety albo dodany w miedzyczasie
        przez inne zadanie (StaleDataError / unique) -> StaleWishlistError, do powtorki.
        """
        rows = {row.product_id: row for row in wishlist.entries}
        wanted = {entry.product_id: entry for entry in state.entries}

        for product_id, row in rows.items():
            if product_id not in wanted:
                wishlist.entries.remove(row)

        for product_id, entry in wanted.items():
            row = rows.get(product_id)
            if row is None:
                wishlist.entries.append(
                    WishlistItemModel(
                        product_id=product_id,
                        selected_size=entry.selected_size,
                        selected_color=entry.selected_color,
                        added_at=entry.added_at,
                    )
                )
            else:
                row.selected_size = entry.selected_size
                row.selected_color = entry.selected_color
                row.added_at = entry.added_at

        try:
            self.db.commit()
        except (IntegrityError, StaleDataError):
            self.db.rollback()
            raise StaleWishlistError()
