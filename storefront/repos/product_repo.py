# storefront/repos/product_repo.py
from typing import Any, Dict, List, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.review import ReviewModel

_SORT_COLUMNS = {
    "price_asc": (ProductModel.price.asc(), ProductModel.id.asc()),
    "price_desc": (ProductModel.price.desc(), ProductModel.id.desc()),
    "name_asc": (ProductModel.name.asc(), ProductModel.id.asc()),
    "rating_desc": (ProductModel.ratings.desc(), ProductModel.id.desc()),
}
_DEFAULT_SORT = (ProductModel.created_at.desc(), ProductModel.id.desc())


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_by_sku(self, sku: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.sku == sku)
        ).scalar_one_or_none()

    def list_products(
        self,
        filters: Dict[str, Any],
        sort: str | None,
        offset: int,
        limit: int,
    ) -> Tuple[List[ProductModel], int]:
        conditions = [ProductModel.is_active.is_(True)]

        if filters.get("category"):
            conditions.append(ProductModel.category == filters["category"])
        if filters.get("brand"):
            conditions.append(ProductModel.brand == filters["brand"])
        if filters.get("min_price") is not None:
            conditions.append(ProductModel.price >= filters["min_price"])
        if filters.get("max_price") is not None:
            conditions.append(ProductModel.price <= filters["max_price"])
        if filters.get("search"):
            pattern = f"%{filters['search']}%"
            conditions.append(
                or_(
                    ProductModel.name.ilike(pattern),
                    ProductModel.description.ilike(pattern),
                    ProductModel.brand.ilike(pattern),
                    ProductModel.category.ilike(pattern),
                )
            )

        total = self.db.execute(
            select(func.count(ProductModel.id)).where(*conditions)
        ).scalar_one()

        stmt = (
            select(ProductModel)
            .where(*conditions)
            .order_by(*_SORT_COLUMNS.get(sort or "", _DEFAULT_SORT))
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save_product(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    # -- reviews ------------------------------------------------------------

    def get_review(self, product_id: int, user_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(
                ReviewModel.product_id == product_id,
                ReviewModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def add_review(self, review: ReviewModel) -> None:
        self.db.add(review)
        self.db.flush()

    def review_stats(self, product_id: int) -> Tuple[int, float]:
        count, avg = self.db.execute(
            select(func.count(ReviewModel.id), func.avg(ReviewModel.rating)).where(
                ReviewModel.product_id == product_id
            )
        ).one()
        return int(count or 0), float(avg or 0.0)

    def update_product_version(self, product_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        # UPDATE products SET ... WHERE id = :id AND version = :old_version
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
