# storefront/domain/schemas.py
import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, enum.Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME_GARDEN = "Home & Garden"
    SPORTS = "Sports"
    BEAUTY = "Beauty"
    TOYS = "Toys"
    OTHER = "Other"


class ProductSort(str, enum.Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NAME_ASC = "name_asc"
    RATING_DESC = "rating_desc"


class Principal(BaseModel):
    """Caller identity handed over by the auth dependency."""

    id: int
    name: str = ""
    role: Literal["user", "admin"] = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class ImageIn(BaseModel):
    public_id: str | None = None
    url: str = Field(..., min_length=1)


class Dimensions(BaseModel):
    length: float | None = None
    width: float | None = None
    height: float | None = None


class ProductCreate(BaseModel):
    """Schema for creating a product."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Product name is required")
    description: str = Field(..., min_length=1, max_length=2000, description="Description is required")
    price: Decimal = Field(..., ge=0, description="Valid price is required")
    compare_at_price: Decimal | None = Field(None, ge=0)
    category: Category
    brand: str = Field(..., min_length=1, description="Brand is required")
    images: List[ImageIn] = Field(default_factory=list)
    stock: int = Field(..., ge=0, description="Valid stock quantity is required")
    sku: str | None = None
    weight: float | None = Field(None, ge=0)
    dimensions: Dimensions | None = None
    tags: List[str] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Partial update; only fields that are sent get applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=2000)
    price: Decimal | None = Field(None, ge=0)
    compare_at_price: Decimal | None = Field(None, ge=0)
    category: Category | None = None
    brand: str | None = Field(None, min_length=1)
    images: List[ImageIn] | None = None
    stock: int | None = Field(None, ge=0)
    sku: str | None = None
    weight: float | None = Field(None, ge=0)
    dimensions: Dimensions | None = None
    tags: List[str] | None = None
    is_active: bool | None = None


class ReviewIn(BaseModel):
    # ranges are checked by ProductService so they surface as ValidationError
    rating: int
    comment: str


class ReviewOut(BaseModel):
    user_id: int
    name: str
    rating: int
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    compare_at_price: Decimal | None = None
    category: Category
    brand: str
    images: List[ImageIn]
    stock: int
    sku: str
    weight: float | None = None
    dimensions: Dimensions | None = None
    tags: List[str]
    ratings: float
    num_of_reviews: int
    user_id: int
    is_active: bool
    created_at: datetime
    reviews: List[ReviewOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    # rendered camelCase on the wire (currentPage, totalPages, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int
    total_pages: int
    total_products: int
    has_next_page: bool
    has_prev_page: bool


class ProductPage(BaseModel):
    products: List[ProductOut]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderItemIn(BaseModel):
    """One cart line as submitted at checkout."""

    product_id: int
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    quantity: int
    image: str = ""


class OrderCreate(BaseModel):
    items: List[OrderItemIn] = Field(default_factory=list)


class OrderStatusIn(BaseModel):
    status: str


class OrderItemOut(BaseModel):
    product_id: int
    name: str
    price: Decimal
    quantity: int
    image: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    status: str
    total: Decimal
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
