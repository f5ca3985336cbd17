# storefront/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    compare_at_price = Column(Numeric(12, 2), nullable=True)
    category = Column(String(32), nullable=False, index=True)
    brand = Column(String, nullable=False, index=True)
    images = Column(JSON, nullable=False, default=list)
    stock = Column(Integer, nullable=False, default=0)
    sku = Column(String, nullable=False, unique=True)
    weight = Column(Float, nullable=True)
    dimensions = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    ratings = Column(Float, nullable=False, default=0.0)
    num_of_reviews = Column(Integer, nullable=False, default=0)

    # creator of the product, compared against the caller on update/delete
    user_id = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # bumped on every review append, compare-and-swap guard
    version = Column(Integer, nullable=False, default=1)

    reviews = relationship(
        "ReviewModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ReviewModel.id",
        lazy="selectin",
    )
