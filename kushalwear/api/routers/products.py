# kushalwear/api/routers/products.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from kushalwear.api.deps import get_current_user
from kushalwear.data.database import get_db
from kushalwear.data.models.user import UserModel
from kushalwear.domain.schemas import Category, ProductListOut, ProductResponse, ReviewIn, SortOption
from kushalwear.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=ProductListOut, response_model_exclude_none=True)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    category: Optional[Category] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    sort: SortOption = Query("newest"),
    search: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    return get_service(db).list_products(
        page=page,
        limit=limit,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        search=search,
    )


@router.get("/featured", response_model=ProductListOut, response_model_exclude_none=True)
def featured_products(db: Session = Depends(get_db)):
    return get_service(db).featured()


@router.get("/search", response_model=ProductListOut, response_model_exclude_none=True)
def search_products(
    q: str = Query(..., min_length=1, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return get_service(db).search(q.strip(), page=page, limit=limit)


@router.get("/categories/{category}", response_model=ProductListOut, response_model_exclude_none=True)
def products_by_category(
    category: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return get_service(db).by_category(category, page=page, limit=limit)


@router.get("/{product_id}", response_model=ProductResponse, response_model_exclude_none=True)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


@router.post("/{product_id}/review", response_model=ProductResponse, status_code=201, response_model_exclude_none=True)
def add_review(
    product_id: str,
    payload: ReviewIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).add_review(product_id, user, payload.rating, payload.comment)
