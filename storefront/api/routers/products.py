# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.auth import CurrentUser
from storefront.data.database import get_db
from storefront.domain.schemas import (
    MessageOut,
    ProductCreate,
    ProductOut,
    ProductPage,
    ProductUpdate,
    ReviewIn,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=ProductPage)
def list_products(
    category: str | None = None,
    brand: str | None = None,
    min_price: str | None = Query(None, alias="minPrice"),
    max_price: str | None = Query(None, alias="maxPrice"),
    search: str | None = None,
    sort: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    db: Session = Depends(get_db),
):
    # page/limit stay strings so bad values fall back to defaults instead of 400
    svc = get_service(db)
    return svc.list_products(
        category=category,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, user: CurrentUser, db: Session = Depends(get_db)):
    return get_service(db).create_product(payload, user)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, user: CurrentUser, db: Session = Depends(get_db)):
    return get_service(db).update_product(product_id, payload, user)


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    get_service(db).delete_product(product_id, user)
    return {"message": "Product removed"}


@router.post("/{product_id}/reviews", response_model=MessageOut, status_code=201)
def add_review(product_id: int, payload: ReviewIn, user: CurrentUser, db: Session = Depends(get_db)):
    get_service(db).add_review(product_id, user, payload.rating, payload.comment)
    return {"message": "Review added"}
