# kushalwear/services/catalog_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from kushalwear.data.models.product import CATEGORIES, ProductModel, ReviewModel
from kushalwear.data.models.user import UserModel
from kushalwear.domain.errors import ConflictError, NotFoundError, ValidationError
from kushalwear.domain.schemas import Pagination
from kushalwear.repos.product_repo import ProductRepo
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)

FEATURED_LIMIT = 8


def product_summary(p: ProductModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "price": p.price,
        "main_image": p.main_image,
        "category": p.category,
        "rating": {"average": p.rating_average, "count": p.rating_count},
        "is_featured": p.is_featured,
        "discount": {
            "percentage": p.discount_percentage,
            "valid_until": p.discount_valid_until,
        },
        "discounted_price": p.discounted_price,
        "has_discount": p.has_discount,
    }


def product_detail(p: ProductModel) -> Dict[str, Any]:
    data = product_summary(p)
    data.update(
        {
            "description": p.description,
            "original_price": p.original_price,
            "subcategory": p.subcategory,
            "images": p.images or [],
            "sizes": p.sizes or [],
            "colors": p.colors or [],
            "stock": p.stock,
            "sku": p.sku,
            "brand": p.brand,
            "material": p.material,
            "care": p.care,
            "tags": p.tags or [],
            "is_active": p.is_active,
            "weight": p.weight,
            "dimensions": p.dimensions,
            "created_at": p.created_at,
            "reviews": [
                {
                    "id": r.id,
                    "user": (
                        {"id": r.user.id, "name": r.user.name, "avatar": r.user.avatar}
                        if r.user
                        else None
                    ),
                    "rating": r.rating,
                    "comment": r.comment,
                    "date": r.created_at,
                }
                for r in p.reviews
            ],
        }
    )
    return data


class CatalogService:
    """Odczyt katalogu: filtrowanie, sortowanie, paginacja. Plus recenzje."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def _page(self, page: int, limit: int, **filters) -> Dict[str, Any]:
        products, total = self.repo.find(page=page, limit=limit, **filters)
        return {
            "products": [product_summary(p) for p in products],
            "pagination": Pagination.build(page, limit, total),
        }

    def list_products(
        self,
        page: int = 1,
        limit: int = 12,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort: str = "newest",
        search: str | None = None,
    ) -> Dict[str, Any]:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("Minimum price cannot be greater than maximum price")

        return self._page(
            page,
            limit,
            category=category,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            search=search or None,
        )

    def featured(self) -> Dict[str, Any]:
        products, _ = self.repo.find(page=1, limit=FEATURED_LIMIT, featured=True)
        return {"products": [product_summary(p) for p in products]}

    def by_category(self, category: str, page: int = 1, limit: int = 12) -> Dict[str, Any]:
        if category not in CATEGORIES:
            raise ValidationError("Invalid category")
        result = self._page(page, limit, category=category)
        result["category"] = category
        return result

    def search(self, query: str, page: int = 1, limit: int = 12) -> Dict[str, Any]:
        result = self._page(page, limit, search=query)
        result["query"] = query
        return result

    def get_active(self, product_id: str) -> ProductModel:
        product = self.repo.get_with_reviews(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.is_active:
            raise NotFoundError("Product not available")
        return product

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return {"product": product_detail(self.get_active(product_id))}

    def add_review(self, product_id: str, user: UserModel, rating: int, comment: str | None) -> Dict[str, Any]:
        product = self.get_active(product_id)

        if any(r.user_id == user.id for r in product.reviews):
            raise ConflictError("You have already reviewed this product")

        updated = self.repo.add_review(
            product,
            ReviewModel(user_id=user.id, rating=rating, comment=comment or ""),
        )
        logger.info(
            f"Review added to product {product_id} by user {user.id}, "
            f"rating now {updated.rating_average:.2f} ({updated.rating_count})"
        )
        return {"message": "Review added successfully", "product": product_detail(updated)}
