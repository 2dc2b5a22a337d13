"""
SQLAlchemy ORM models for the Inventory service.

Defines the database schema for stores and the products they stock.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
    select,
)
from sqlalchemy.orm import column_property, relationship
from .database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Store(Base):
    """
    Store model representing a physical shop location.

    Attributes:
        id (str): Primary key, UUID4 string
        name (str): Display name of the store
        address, city, state, zip_code (str): Postal address
        phone (str): Contact phone number (optional)
        email (str): Contact email address (optional)
        is_active (bool): Whether the store is currently trading
        created_at (datetime): Timestamp when the store was created
        updated_at (datetime): Timestamp of the last modification
        product_count (int): Number of products owned by the store (derived)
    """
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(20), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    products = relationship("Product", back_populates="store", passive_deletes="all")


class Product(Base):
    """
    Product model representing a stock line held by one store.

    Attributes:
        id (str): Primary key, UUID4 string
        name (str): Product name
        description (str): Free-text description (optional)
        sku (str): Stock Keeping Unit, unique across all stores
        category (str): Free-text category label
        price (Decimal): Unit price, two decimal places
        quantity (int): Units on hand, never negative
        min_stock (int): Threshold at or below which the product is low on stock
        is_active (bool): Whether the product is listed
        version (int): Optimistic-locking token, bumped on every field update
        store_id (str): Owning store, fixed at creation
        created_at (datetime): Timestamp when the product was created
        updated_at (datetime): Timestamp of the last modification
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint("min_stock >= 0", name="ck_products_min_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    sku = Column(String(50), unique=True, index=True, nullable=False)
    category = Column(String(100), index=True, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=10)
    is_active = Column(Boolean, default=True, nullable=False)
    version = Column(Integer, nullable=False, default=0)
    store_id = Column(
        String(36), ForeignKey("stores.id", ondelete="RESTRICT"), index=True, nullable=False
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    store = relationship("Store", back_populates="products")


Store.product_count = column_property(
    select(func.count(Product.id))
    .where(Product.store_id == Store.id)
    .correlate_except(Product)
    .scalar_subquery()
)
