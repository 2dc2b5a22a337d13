"""
CRUD (Create, Read, Update, Delete) operations for the Inventory service.

This module contains all database operations for stores and products. Functions
here report absence with None or a row count; deciding what absence means is left
to the service modules (stores, products, query, analytics).
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy import func, update
from sqlalchemy.orm import Session, joinedload, selectinload
from . import models, schemas


# Stores

def get_store(db: Session, store_id: str) -> Optional[models.Store]:
    """
    Retrieve a single store by ID.

    Args:
        db: Database session
        store_id: ID of the store to retrieve

    Returns:
        Store object or None if not found
    """
    return db.query(models.Store).filter(models.Store.id == store_id).first()


def get_stores(db: Session) -> List[models.Store]:
    """
    Retrieve all stores, newest first.

    Args:
        db: Database session

    Returns:
        List of Store objects
    """
    return db.query(models.Store).order_by(
        models.Store.created_at.desc(), models.Store.id
    ).all()


def get_stores_with_products(db: Session) -> List[models.Store]:
    """Retrieve every store with its products loaded, oldest first."""
    return (
        db.query(models.Store)
        .options(selectinload(models.Store.products))
        .order_by(models.Store.created_at, models.Store.id)
        .all()
    )


def create_store(db: Session, store: schemas.StoreCreate) -> models.Store:
    """
    Create a new store in the database.

    Args:
        db: Database session
        store: Store data to create

    Returns:
        Created Store object
    """
    db_store = models.Store(**store.model_dump())
    db.add(db_store)
    db.commit()
    db.refresh(db_store)
    return db_store


def update_store(db: Session, db_store: models.Store, update_data: Dict[str, Any]) -> models.Store:
    """
    Apply a partial update to a loaded store.

    Args:
        db: Database session
        db_store: Store to modify
        update_data: Field values to set

    Returns:
        Updated Store object
    """
    for key, value in update_data.items():
        setattr(db_store, key, value)

    db.commit()
    db.refresh(db_store)
    return db_store


def delete_store(db: Session, db_store: models.Store) -> None:
    db.delete(db_store)
    db.commit()


# Products

def get_product(db: Session, product_id: str, with_store: bool = False) -> Optional[models.Product]:
    """
    Retrieve a single product by ID.

    Args:
        db: Database session
        product_id: ID of the product to retrieve
        with_store: Eagerly load the owning store

    Returns:
        Product object or None if not found
    """
    query = db.query(models.Product)
    if with_store:
        query = query.options(joinedload(models.Product.store))
    return query.filter(models.Product.id == product_id).first()


def get_product_by_sku(
    db: Session, sku: str, exclude_id: Optional[str] = None
) -> Optional[models.Product]:
    """
    Retrieve a product by SKU.

    Args:
        db: Database session
        sku: SKU to search for
        exclude_id: Ignore the product with this ID (used when a product keeps its own SKU)

    Returns:
        Product object or None if not found
    """
    query = db.query(models.Product).filter(models.Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(models.Product.id != exclude_id)
    return query.first()


def get_products(
    db: Session,
    criteria: Sequence[Any],
    order_by: Sequence[Any],
    skip: int,
    limit: int,
) -> Tuple[List[models.Product], int]:
    """
    Retrieve one page of products matching every criterion.

    Args:
        db: Database session
        criteria: SQLAlchemy boolean expressions, combined with AND
        order_by: ORDER BY expressions
        skip: Number of matching rows to skip (offset)
        limit: Maximum number of rows to return

    Returns:
        Tuple of (page of Product objects with their store, total matching count)
    """
    base = db.query(models.Product).filter(*criteria)
    total = base.with_entities(func.count(models.Product.id)).scalar() or 0
    rows = (
        base.options(joinedload(models.Product.store))
        .order_by(*order_by)
        .offset(skip)
        .limit(limit)
        .all()
    )
    return rows, total


def get_products_with_store(db: Session, criteria: Sequence[Any] = (), order_by: Sequence[Any] = ()) -> List[models.Product]:
    """Retrieve every product matching the criteria, with its store loaded."""
    return (
        db.query(models.Product)
        .options(joinedload(models.Product.store))
        .filter(*criteria)
        .order_by(*order_by)
        .all()
    )


def get_categories(db: Session) -> List[str]:
    rows = (
        db.query(models.Product.category)
        .distinct()
        .order_by(models.Product.category)
        .all()
    )
    return [row.category for row in rows]


def create_product(db: Session, product: schemas.ProductCreate) -> models.Product:
    """
    Create a new product in the database.

    Args:
        db: Database session
        product: Product data to create

    Returns:
        Created Product object (version 0)
    """
    db_product = models.Product(**product.model_dump(), version=0)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def update_product_if_version(
    db: Session, product_id: str, expected_version: int, update_data: Dict[str, Any]
) -> int:
    """
    Apply a patch and bump the version in one conditional UPDATE.

    The row is only touched when both its id and its current version match,
    so two writers holding the same version cannot both succeed.

    Args:
        db: Database session
        product_id: ID of the product to update
        expected_version: Version the caller last read
        update_data: Field values to set

    Returns:
        Number of rows updated (0 or 1)
    """
    stmt = (
        update(models.Product)
        .where(models.Product.id == product_id, models.Product.version == expected_version)
        .values(**update_data, version=models.Product.version + 1)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount


def increment_quantity(db: Session, product_id: str, delta: int) -> int:
    """
    Atomically add delta to a product's quantity.

    The UPDATE also refuses to take the quantity below zero or past MAX_INT, so a
    concurrent change between the caller's read and this statement cannot
    overdraw stock or overflow the column.

    Args:
        db: Database session
        product_id: ID of the product to adjust
        delta: Signed number of units to add

    Returns:
        Number of rows updated (0 or 1)
    """
    stmt = (
        update(models.Product)
        .where(
            models.Product.id == product_id,
            models.Product.quantity + delta >= 0,
            models.Product.quantity + delta <= schemas.MAX_INT,
        )
        .values(quantity=models.Product.quantity + delta)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount


def delete_product(db: Session, db_product: models.Product) -> None:
    db.delete(db_product)
    db.commit()
