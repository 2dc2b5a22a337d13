"""
    Inventory Service API

    This module implements a FastAPI-based service for managing stores and the
    products they stock, with PostgreSQL database persistence.

    The service exposes:
    - CRUD endpoints for stores
    - Product listing with filters, sorting and pagination
    - Versioned product updates and version-free quantity adjustments
    - Read-only analytics (inventory value, low stock, category summary)
    - Health endpoint: Provides service health status for monitoring and orchestration
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import analytics, models, products, query, schemas, stores
from .config import CORS_ALLOWED_ORIGINS, configure_logging
from .database import engine, get_db
from .errors import InventoryError

configure_logging()
logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="inventory-service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
logger.info(f"CORS configured for origins: {', '.join(CORS_ALLOWED_ORIGINS)}")


@app.exception_handler(InventoryError)
def handle_inventory_error(request: Request, exc: InventoryError):
    """Render service errors with the same body shape as HTTPException."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the inventory service.

    This endpoint is typically used by orchestrators (like Kubernetes) or load balancers
    to determine if the service is running and ready to accept requests.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): "healthy" if the service is operational.
            - timestamp (str): Current UTC time in ISO 8601 format.

    Example:
        GET /healthz
        Response: {"status": "healthy", "timestamp": "2024-01-01T00:00:00+00:00"}
    """
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# Stores

@app.get("/stores", response_model=List[schemas.Store])
def list_stores(db: Session = Depends(get_db)):
    """
    List all stores, newest first, each with its product count.

    Args:
        db: Database session (injected)

    Returns:
        List of store objects
    """
    return stores.list_stores(db)


@app.get("/stores/{store_id}", response_model=schemas.Store)
def get_store(store_id: UUID, db: Session = Depends(get_db)):
    """
    Get a single store by ID.

    Raises:
        NotFoundError: 404 if store not found
    """
    return stores.get_store(db, str(store_id))


@app.post("/stores", response_model=schemas.Store, status_code=status.HTTP_201_CREATED)
def create_store(store: schemas.StoreCreate, db: Session = Depends(get_db)):
    """
    Create a new store.

    Args:
        store: Store data to create
        db: Database session (injected)

    Returns:
        Created store object
    """
    return stores.create_store(db, store)


@app.patch("/stores/{store_id}", response_model=schemas.Store)
def update_store(store_id: UUID, store: schemas.StoreUpdate, db: Session = Depends(get_db)):
    """
    Update an existing store (only provided fields are changed).

    Raises:
        NotFoundError: 404 if store not found
    """
    return stores.update_store(db, str(store_id), store)


@app.delete("/stores/{store_id}", response_model=schemas.Store)
def delete_store(store_id: UUID, db: Session = Depends(get_db)):
    """
    Delete a store that has no products.

    Returns:
        The deleted store

    Raises:
        NotFoundError: 404 if store not found
        ConflictError: 409 if the store still has products
    """
    return stores.delete_store(db, str(store_id))


# Products

@app.get("/products", response_model=schemas.PaginatedProducts)
def list_products(
    store_id: Optional[UUID] = None,
    category: Optional[str] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    in_stock: Optional[bool] = None,
    low_stock: Optional[bool] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1, le=schemas.MAX_INT),
    limit: int = Query(20, ge=1, le=schemas.MAX_PAGE_SIZE),
    sort_by: schemas.SortField = "createdAt",
    sort_order: schemas.SortOrder = "desc",
    db: Session = Depends(get_db),
):
    """
    List products matching every supplied filter, one page at a time.

    Args:
        store_id: Only products of this store
        category: Only products with this exact category
        min_price / max_price: Inclusive price bounds
        in_stock: Only products with quantity > 0
        low_stock: Only products with quantity <= min_stock
        search: Case-insensitive match on name, description or SKU
        page: Page number, starting at 1 (default: 1)
        limit: Page size, 1-100 (default: 20)
        sort_by: name, price, quantity, createdAt, category or sku (default: createdAt)
        sort_order: asc or desc (default: desc)
        db: Database session (injected)

    Returns:
        Page of products with pagination metadata
    """
    product_query = schemas.ProductQuery(
        store_id=str(store_id) if store_id else None,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        low_stock=low_stock,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return query.list_products(db, product_query)


@app.get("/products/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    """Distinct product categories in alphabetical order."""
    return products.list_categories(db)


@app.get("/products/{product_id}", response_model=schemas.Product)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    """
    Get a single product by ID, including its store.

    Raises:
        NotFoundError: 404 if product not found
    """
    return products.get_product(db, str(product_id))


@app.post("/products", response_model=schemas.Product, status_code=status.HTTP_201_CREATED)
def create_product(product: schemas.ProductCreate, db: Session = Depends(get_db)):
    """
    Create a new product.

    Args:
        product: Product data to create
        db: Database session (injected)

    Returns:
        Created product object (version 0)

    Raises:
        NotFoundError: 404 if the store does not exist
        ConflictError: 409 if SKU already exists
    """
    return products.create_product(db, product)


@app.patch("/products/{product_id}", response_model=schemas.Product)
def update_product(product_id: UUID, product: schemas.ProductUpdate, db: Session = Depends(get_db)):
    """
    Update a product's fields, guarded by its version.

    The body must carry the version the client last read. On 409 the client
    should re-fetch the product and retry with the new version.

    Raises:
        NotFoundError: 404 if product not found
        ConflictError: 409 if SKU already exists or the version is stale
    """
    return products.update_product(db, str(product_id), product)


@app.post("/products/{product_id}/adjust-quantity", response_model=schemas.Product)
def adjust_quantity(
    product_id: UUID,
    adjustment: schemas.QuantityAdjustment,
    db: Session = Depends(get_db),
):
    """
    Add or remove stock. Does not require or change the product version.

    Raises:
        NotFoundError: 404 if product not found
        InvalidRequestError: 400 if the result would be negative
    """
    return products.adjust_quantity(db, str(product_id), adjustment)


@app.delete("/products/{product_id}", response_model=schemas.Product)
def delete_product(product_id: UUID, db: Session = Depends(get_db)):
    """
    Delete a product.

    Returns:
        The deleted product

    Raises:
        NotFoundError: 404 if product not found
    """
    return products.delete_product(db, str(product_id))


# Analytics

@app.get("/analytics/inventory-value", response_model=schemas.InventoryValue)
def get_inventory_value(db: Session = Depends(get_db)):
    """
    Stock value per store and across all stores.

    Returns:
        dict: stores (id, name, product count, quantity, value) and grand_total
    """
    return analytics.inventory_value(db)


@app.get("/analytics/low-stock", response_model=List[schemas.LowStockProduct])
def get_low_stock_products(db: Session = Depends(get_db)):
    """Products at or below their minimum stock, lowest quantity first."""
    return analytics.low_stock_products(db)


@app.get("/analytics/category-summary", response_model=List[schemas.CategorySummary])
def get_category_summary(db: Session = Depends(get_db)):
    """Product count, quantity, value and average price per category."""
    return analytics.category_summary(db)
