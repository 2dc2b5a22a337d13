"""
Pydantic schemas for request/response validation in the Inventory service.

These schemas define the structure of data for API requests and responses.
"""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional
from pydantic import AfterValidator, BaseModel, EmailStr, Field

SortField = Literal["name", "price", "quantity", "createdAt", "category", "sku"]
SortOrder = Literal["asc", "desc"]
AdjustmentReason = Literal["sale", "return", "restock", "damaged", "correction", "other"]

MAX_PAGE_SIZE = 100
# Largest value the INTEGER columns (quantity, min_stock, version) can hold
MAX_INT = 2**31 - 1


def canonical_uuid(value: str) -> str:
    """Validate an ID as a UUID and return it in lowercase hyphenated form."""
    return str(uuid.UUID(value))


UUIDStr = Annotated[str, AfterValidator(canonical_uuid)]


# Stores

class StoreBase(BaseModel):
    """Base schema with common store attributes."""
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    zip_code: str = Field(..., min_length=1, max_length=20)
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None


class StoreCreate(StoreBase):
    """Schema for creating a new store."""
    pass


class StoreUpdate(BaseModel):
    """Schema for updating an existing store. All fields are optional."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    city: Optional[str] = Field(default=None, min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, min_length=1, max_length=50)
    zip_code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


class Store(StoreBase):
    """
    Schema for store responses, includes all database fields.

    Attributes:
        id (str): Store's unique identifier
        is_active (bool): Whether the store is trading
        product_count (int): Number of products the store owns
        created_at (datetime): When the store was created
        updated_at (datetime): When the store was last modified
    """
    id: str
    email: Optional[str] = None
    is_active: bool
    product_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Products

class ProductCreate(BaseModel):
    """Schema for creating a new product."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    sku: str = Field(..., min_length=1, max_length=50)
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(default=0, ge=0, le=MAX_INT)
    min_stock: int = Field(default=10, ge=0, le=MAX_INT)
    store_id: UUIDStr


class ProductUpdate(BaseModel):
    """
    Schema for a versioned product update.

    `version` is the version the caller last read; every other field is
    optional. Quantity is changed through an adjustment, not here.
    """
    version: int = Field(..., ge=0, le=MAX_INT, description="Version the change is based on")
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    sku: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    min_stock: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    is_active: Optional[bool] = None


class QuantityAdjustment(BaseModel):
    """Schema for a stock movement: positive adds stock, negative removes it."""
    adjustment: int = Field(..., ge=-MAX_INT, le=MAX_INT, description="Positive to add stock, negative to remove")
    reason: AdjustmentReason
    note: Optional[str] = Field(default=None, max_length=500)


class Product(BaseModel):
    """
    Schema for product responses, includes all database fields and the owning store.

    Attributes:
        id (str): Product's unique identifier
        sku (str): Stock Keeping Unit
        price (Decimal): Unit price
        quantity (int): Units on hand
        min_stock (int): Low-stock threshold
        version (int): Current optimistic-locking version
        store (Store): Owning store
    """
    id: str
    name: str
    description: Optional[str] = None
    sku: str
    category: str
    price: Decimal
    quantity: int
    min_stock: int
    is_active: bool
    version: int
    store_id: str
    created_at: datetime
    updated_at: datetime
    store: Optional[Store] = None

    class Config:
        from_attributes = True


class ProductQuery(BaseModel):
    """Filter, sort and page parameters for the product listing."""
    store_id: Optional[UUIDStr] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = Field(default=None, ge=0)
    max_price: Optional[Decimal] = Field(default=None, ge=0)
    in_stock: Optional[bool] = None
    low_stock: Optional[bool] = None
    search: Optional[str] = None
    page: int = Field(default=1, ge=1, le=MAX_INT)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)
    sort_by: SortField = "createdAt"
    sort_order: SortOrder = "desc"


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PaginatedProducts(BaseModel):
    data: List[Product]
    meta: PaginationMeta


# Analytics

class StoreInventoryValue(BaseModel):
    store_id: str
    store_name: str
    total_products: int
    total_quantity: int
    total_value: Decimal


class InventoryValue(BaseModel):
    stores: List[StoreInventoryValue]
    grand_total: Decimal


class LowStockProduct(BaseModel):
    id: str
    name: str
    sku: str
    category: str
    quantity: int
    min_stock: int
    deficit: int
    store_id: str
    store_name: str


class CategorySummary(BaseModel):
    category: str
    product_count: int
    total_quantity: int
    total_value: Decimal
    average_price: Decimal
