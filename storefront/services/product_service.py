# storefront/services/product_service.py
import math
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.review import ReviewModel
from storefront.domain.errors import ConcurrencyConflict, Conflict, NotFound, Unauthorized, ValidationError
from storefront.domain.schemas import Principal, ProductCreate, ProductSort, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.utils.retry import cas_retry
from storefront.utils.settings import DEFAULT_PAGE_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5
MIN_COMMENT_LENGTH = 10

# columns that may not be cleared through a partial update
_NOT_NULLABLE = {"name", "description", "price", "category", "brand", "images", "stock", "sku", "tags", "is_active"}


def _to_positive_int(value, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _to_decimal(value) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid price filter '{value}'")


def generate_sku(category: str, now_ms: int | None = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{category[:3].upper()}-{stamp}"


class ProductService:
    """Catalogue queries, admin maintenance and review appends."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    # queries
    def list_products(
        self,
        category: str | None = None,
        brand: str | None = None,
        min_price=None,
        max_price=None,
        search: str | None = None,
        sort: str | None = None,
        page=None,
        limit=None,
    ) -> Dict[str, Any]:
        page = _to_positive_int(page, 1)
        limit = _to_positive_int(limit, DEFAULT_PAGE_SIZE)

        # unknown sort keys fall back to newest first
        sort_key = sort if sort in {s.value for s in ProductSort} else None

        products, total = self.repo.list_products(
            filters={
                "category": category,
                "brand": brand,
                "min_price": _to_decimal(min_price),
                "max_price": _to_decimal(max_price),
                "search": (search or "").strip() or None,
            },
            sort=sort_key,
            offset=(page - 1) * limit,
            limit=limit,
        )

        return {
            "products": products,
            "pagination": {
                "current_page": page,
                "total_pages": math.ceil(total / limit),
                "total_products": total,
                "has_next_page": page * limit < total,
                "has_prev_page": page > 1,
            },
        }

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    # commands
    def create_product(self, payload: ProductCreate, caller: Principal) -> ProductModel:
        if not caller.is_admin:
            raise Unauthorized("Not authorized")

        sku = payload.sku or generate_sku(payload.category.value)
        if self.repo.get_by_sku(sku):
            raise Conflict(f"Product with SKU {sku} already exists")

        product = ProductModel(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            compare_at_price=payload.compare_at_price,
            category=payload.category.value,
            brand=payload.brand,
            images=[img.model_dump() for img in payload.images],
            stock=payload.stock,
            sku=sku,
            weight=payload.weight,
            dimensions=payload.dimensions.model_dump() if payload.dimensions else None,
            tags=list(payload.tags),
            user_id=caller.id,
        )

        created = self.repo.create_product(product)
        logger.info(f"Product {created.id} ({sku}) created by user {caller.id}")
        return created

    def _get_owned(self, product_id: int, caller: Principal) -> ProductModel:
        product = self.get_product(product_id)

        if not caller.is_admin and product.user_id != caller.id:
            raise Unauthorized("Not authorized")

        return product

    def update_product(self, product_id: int, payload: ProductUpdate, caller: Principal) -> ProductModel:
        product = self._get_owned(product_id, caller)
        changes = payload.model_dump(exclude_unset=True)

        for field, value in changes.items():
            if value is None and field in _NOT_NULLABLE:
                raise ValidationError(f"{field} cannot be empty")

        if "sku" in changes and changes["sku"] != product.sku and self.repo.get_by_sku(changes["sku"]):
            raise Conflict(f"Product with SKU {changes['sku']} already exists")

        if changes.get("category") is not None:
            changes["category"] = payload.category.value

        for field, value in changes.items():
            setattr(product, field, value)

        updated = self.repo.save_product(product)
        logger.info(f"Product {product_id} updated by user {caller.id}: {sorted(changes)}")
        return updated

    def delete_product(self, product_id: int, caller: Principal) -> None:
        product = self._get_owned(product_id, caller)
        self.repo.delete_product(product)
        logger.info(f"Product {product_id} removed by user {caller.id}")

    def add_review(self, product_id: int, user: Principal, rating: int, comment: str) -> ProductModel:
        """
        Append a review and recompute the product's mean rating.

        One review per user per product. The aggregate update is a
        compare-and-swap on products.version; a lost race is retried.
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        comment = (comment or "").strip()
        if len(comment) < MIN_COMMENT_LENGTH:
            raise ValidationError(f"Comment must be at least {MIN_COMMENT_LENGTH} characters")

        self.get_product(product_id)

        if self.repo.get_review(product_id, user.id):
            raise Conflict("Product already reviewed")

        return self._append_review(product_id, user, rating, comment)

    @cas_retry()
    def _append_review(self, product_id: int, user: Principal, rating: int, comment: str) -> ProductModel:
        product = self.get_product(product_id)
        self.db.refresh(product)
        old_version = product.version

        try:
            self.repo.add_review(
                ReviewModel(
                    product_id=product_id,
                    user_id=user.id,
                    name=user.name,
                    rating=rating,
                    comment=comment,
                )
            )
        except IntegrityError:
            # a concurrent request from the same user got there first
            self.repo.rollback()
            raise Conflict("Product already reviewed")

        count, mean = self.repo.review_stats(product_id)

        rowcount = self.repo.update_product_version(
            product_id=product_id,
            old_version=old_version,
            new_data={
                "version": old_version + 1,
                "ratings": mean,
                "num_of_reviews": count,
            },
        )

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Review on product {product_id} lost version race at v{old_version}, retrying")
            raise ConcurrencyConflict("Product was modified concurrently, review not saved")

        self.repo.commit()
        self.db.refresh(product)

        logger.info(
            f"Review by user {user.id} added to product {product_id}, "
            f"ratings {mean:.2f} over {count} reviews, version {old_version + 1}"
        )
        return product
