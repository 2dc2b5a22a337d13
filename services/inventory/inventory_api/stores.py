"""
Store management for the Inventory service.

A store that still owns products cannot be deleted; its products have to be
removed first.
"""
import logging
from typing import List
from sqlalchemy.orm import Session
from . import crud, models, schemas
from .errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def list_stores(db: Session) -> List[models.Store]:
    return crud.get_stores(db)


def get_store(db: Session, store_id: str) -> models.Store:
    """
    Fetch a store with its product count.

    Raises:
        NotFoundError: If no store has this ID
    """
    store = crud.get_store(db, store_id)
    if store is None:
        raise NotFoundError(f"Store with ID {store_id} not found")
    return store


def create_store(db: Session, store: schemas.StoreCreate) -> models.Store:
    db_store = crud.create_store(db, store)
    logger.info(f"Created store {db_store.id} ({db_store.name})")
    return db_store


def update_store(db: Session, store_id: str, store: schemas.StoreUpdate) -> models.Store:
    """
    Apply a partial update to a store.

    Fields sent as null are ignored, except phone and email which may be cleared.

    Raises:
        NotFoundError: If no store has this ID
    """
    db_store = get_store(db, store_id)
    update_data = {
        key: value for key, value in store.model_dump(exclude_unset=True).items()
        if value is not None or key in ("phone", "email")
    }
    db_store = crud.update_store(db, db_store, update_data)
    logger.info(f"Updated store {store_id}: {', '.join(sorted(update_data)) or 'no changes'}")
    return db_store


def delete_store(db: Session, store_id: str) -> schemas.Store:
    """
    Delete a store that owns no products.

    Returns:
        The store as it was just before deletion

    Raises:
        NotFoundError: If no store has this ID
        ConflictError: If products still reference the store
    """
    db_store = get_store(db, store_id)
    if db_store.product_count:
        logger.warning(f"Rejected deletion of store {store_id}: {db_store.product_count} products remain")
        raise ConflictError(f"Store with ID {store_id} still has {db_store.product_count} products")

    snapshot = schemas.Store.model_validate(db_store)
    crud.delete_store(db, db_store)
    logger.info(f"Deleted store {store_id} ({snapshot.name})")
    return snapshot
