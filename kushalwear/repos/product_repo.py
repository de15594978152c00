# kushalwear/repos/product_repo.py
from typing import Iterable

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session, selectinload

from kushalwear.data.models.product import ProductModel, ReviewModel

SORTS = {
    "price_asc": ProductModel.price.asc(),
    "price_desc": ProductModel.price.desc(),
    "name_asc": ProductModel.name.asc(),
    "name_desc": ProductModel.name.desc(),
    "rating": ProductModel.rating_average.desc(),
    "newest": ProductModel.created_at.desc(),
}


def search_clause(query: str):
    pattern = f"%{query}%"
    return or_(
        ProductModel.name.ilike(pattern),
        ProductModel.description.ilike(pattern),
        cast(ProductModel.tags, String).ilike(pattern),
    )


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_with_reviews(self, product_id: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .options(selectinload(ProductModel.reviews).selectinload(ReviewModel.user))
        ).scalar_one_or_none()

    def get_many(self, product_ids: Iterable[str]) -> dict[str, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        products = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in products}

    def find(
        self,
        *,
        page: int = 1,
        limit: int = 12,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
        featured: bool | None = None,
        sort: str = "newest",
    ):
        """Zwraca (produkty na stronie, liczba wszystkich pasujacych). Tylko aktywne."""
        filters = [ProductModel.is_active.is_(True)]
        if category:
            filters.append(ProductModel.category == category)
        if min_price is not None:
            filters.append(ProductModel.price >= min_price)
        if max_price is not None:
            filters.append(ProductModel.price <= max_price)
        if search:
            filters.append(search_clause(search))
        if featured is not None:
            filters.append(ProductModel.is_featured.is_(featured))

        total = self.db.execute(
            select(func.count()).select_from(ProductModel).where(*filters)
        ).scalar_one()

        products = self.db.execute(
            select(ProductModel)
            .where(*filters)
            .order_by(SORTS.get(sort, SORTS["newest"]), ProductModel.id)
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return products, total

    def add_review(self, product: ProductModel, review: ReviewModel) -> ProductModel:
        product.reviews.append(review)
        product.recompute_rating()
        self.db.commit()
        return self.get_with_reviews(product.id)
