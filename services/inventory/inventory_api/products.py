"""
Product write path and single-product reads.

There are two update strategies:

- update_product edits descriptive fields and is guarded by the product's
  version (compare-and-swap). A caller holding a stale version gets a
  ConflictError and must re-read before retrying.
- adjust_quantity moves stock and ignores the version entirely. The quantity
  change is a single atomic increment in the database.
"""
import logging
from typing import List
from sqlalchemy.orm import Session
from . import crud, models, schemas
from .errors import ConflictError, InvalidRequestError, NotFoundError

logger = logging.getLogger(__name__)

# Fields that may be explicitly cleared with null in an update
NULLABLE_FIELDS = {"description"}

VERSION_CONFLICT_MESSAGE = "This product was modified by another user. Please refresh and try again."


def _not_found(product_id: str) -> NotFoundError:
    return NotFoundError(f"Product with ID {product_id} not found")


def _duplicate_sku(sku: str) -> ConflictError:
    return ConflictError(f"Product with SKU {sku} already exists")


def _too_much_stock(delta: int) -> InvalidRequestError:
    return InvalidRequestError(
        f"Cannot add {delta} units. Quantity cannot exceed {schemas.MAX_INT}."
    )


def get_product(db: Session, product_id: str) -> models.Product:
    """
    Fetch a product together with its store.

    Raises:
        NotFoundError: If no product has this ID
    """
    product = crud.get_product(db, product_id, with_store=True)
    if product is None:
        raise _not_found(product_id)
    return product


def list_categories(db: Session) -> List[str]:
    return crud.get_categories(db)


def create_product(db: Session, product: schemas.ProductCreate) -> models.Product:
    """
    Create a product in an existing store.

    Args:
        db: Database session
        product: Validated product data

    Returns:
        The created product (version 0) with its store

    Raises:
        NotFoundError: If the store does not exist (checked first)
        ConflictError: If the SKU is already used by any product in any store
    """
    if crud.get_store(db, product.store_id) is None:
        logger.warning(f"Rejected product {product.sku}: store {product.store_id} not found")
        raise NotFoundError(f"Store with ID {product.store_id} not found")

    if crud.get_product_by_sku(db, product.sku) is not None:
        logger.warning(f"Rejected product: SKU {product.sku} already exists")
        raise _duplicate_sku(product.sku)

    db_product = crud.create_product(db, product)
    logger.info(f"Created product {db_product.id} ({db_product.sku}) in store {db_product.store_id}")
    return get_product(db, db_product.id)


def update_product(db: Session, product_id: str, product: schemas.ProductUpdate) -> models.Product:
    """
    Apply a versioned update to a product.

    The patch is written with a single UPDATE ... WHERE id = ? AND version = ?
    that also increments the version. When nothing is updated the product is
    re-read to tell a missing product from a stale version.

    Args:
        db: Database session
        product_id: ID of the product to update
        product: Patch carrying the version the caller last read

    Returns:
        The updated product with its store

    Raises:
        ConflictError: If the new SKU belongs to another product, or the version is stale
        NotFoundError: If the product does not exist
    """
    update_data = product.model_dump(exclude_unset=True, exclude={"version"})
    update_data = {
        key: value for key, value in update_data.items()
        if value is not None or key in NULLABLE_FIELDS
    }

    sku = update_data.get("sku")
    if sku is not None and crud.get_product_by_sku(db, sku, exclude_id=product_id) is not None:
        logger.warning(f"Rejected update of product {product_id}: SKU {sku} already exists")
        raise _duplicate_sku(sku)

    updated = crud.update_product_if_version(db, product_id, product.version, update_data)
    if updated == 0:
        current = crud.get_product(db, product_id)
        if current is None:
            logger.warning(f"Rejected update: product {product_id} not found")
            raise _not_found(product_id)
        logger.warning(
            f"Version conflict on product {product_id}: "
            f"expected {product.version}, current {current.version}"
        )
        raise ConflictError(VERSION_CONFLICT_MESSAGE)

    db_product = get_product(db, product_id)
    logger.info(f"Updated product {product_id} to version {db_product.version}")
    return db_product


def adjust_quantity(db: Session, product_id: str, adjustment: schemas.QuantityAdjustment) -> models.Product:
    """
    Add or remove stock without touching the product's version.

    Args:
        db: Database session
        product_id: ID of the product to adjust
        adjustment: Signed delta, reason tag and optional note

    Returns:
        The adjusted product with its store

    Raises:
        NotFoundError: If the product does not exist
        InvalidRequestError: If the adjustment would take quantity below zero or past MAX_INT
    """
    delta = adjustment.adjustment
    product = crud.get_product(db, product_id)
    if product is None:
        logger.warning(f"Rejected adjustment: product {product_id} not found")
        raise _not_found(product_id)

    if product.quantity + delta < 0:
        logger.warning(
            f"Rejected adjustment of product {product_id} by {delta}: only {product.quantity} in stock"
        )
        raise InvalidRequestError(
            f"Cannot reduce quantity by {abs(delta)}. Current stock is {product.quantity}."
        )

    if product.quantity + delta > schemas.MAX_INT:
        logger.warning(
            f"Rejected adjustment of product {product_id} by {delta}: quantity would exceed {schemas.MAX_INT}"
        )
        raise _too_much_stock(delta)

    if crud.increment_quantity(db, product_id, delta) == 0:
        # Stock changed or the product vanished between the read and the update
        current = crud.get_product(db, product_id)
        if current is None:
            raise _not_found(product_id)
        if delta > 0:
            raise _too_much_stock(delta)
        raise InvalidRequestError(
            f"Cannot reduce quantity by {abs(delta)}. Current stock is {current.quantity}."
        )

    db_product = get_product(db, product_id)
    note = f" ({adjustment.note})" if adjustment.note else ""
    logger.info(
        f"Adjusted product {product_id} by {delta} for {adjustment.reason}{note}: "
        f"quantity now {db_product.quantity}"
    )
    return db_product


def delete_product(db: Session, product_id: str) -> schemas.Product:
    """
    Delete a product.

    Returns:
        The product as it was just before deletion

    Raises:
        NotFoundError: If the product does not exist
    """
    product = get_product(db, product_id)
    snapshot = schemas.Product.model_validate(product)
    crud.delete_product(db, product)
    logger.info(f"Deleted product {product_id} ({snapshot.sku})")
    return snapshot
