"""
Product listing: filtering, sorting and pagination.

Every filter is translated into a SQL expression, including low stock, which
compares two columns of the same row (quantity <= min_stock) and is evaluated
by the database like any other WHERE clause. Counting and paging therefore
happen on the fully filtered set.

Search uses ILIKE. PostgreSQL folds case for every letter; SQLite emulates it
with lower(), which folds ASCII only, so there "émile" does not match "Émile".
"""
import logging
import math
from typing import Any, List
from sqlalchemy import or_
from sqlalchemy.orm import Session
from . import crud, models, schemas

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "name": models.Product.name,
    "price": models.Product.price,
    "quantity": models.Product.quantity,
    "createdAt": models.Product.created_at,
    "category": models.Product.category,
    "sku": models.Product.sku,
}


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_criteria(query: schemas.ProductQuery) -> List[Any]:
    """
    Translate the filter part of a product query into SQL expressions.

    Args:
        query: Validated product query

    Returns:
        List of boolean expressions to be combined with AND
    """
    Product = models.Product
    criteria = []

    if query.store_id:
        criteria.append(Product.store_id == query.store_id)
    if query.category:
        criteria.append(Product.category == query.category)
    if query.min_price is not None:
        criteria.append(Product.price >= query.min_price)
    if query.max_price is not None:
        criteria.append(Product.price <= query.max_price)
    if query.in_stock:
        criteria.append(Product.quantity > 0)
    if query.low_stock:
        criteria.append(Product.quantity <= Product.min_stock)
    if query.search:
        pattern = _like_pattern(query.search)
        criteria.append(
            or_(
                Product.name.ilike(pattern, escape="\\"),
                Product.description.ilike(pattern, escape="\\"),
                Product.sku.ilike(pattern, escape="\\"),
            )
        )

    return criteria


def build_order_by(query: schemas.ProductQuery) -> List[Any]:
    """ORDER BY for the requested sort, with id as a tiebreaker so pages never overlap."""
    column = SORT_COLUMNS[query.sort_by]
    if query.sort_order == "asc":
        return [column.asc(), models.Product.id.asc()]
    return [column.desc(), models.Product.id.desc()]


def pagination_meta(total: int, page: int, limit: int) -> schemas.PaginationMeta:
    """
    Compute pagination metadata for a result set.

    Args:
        total: Number of rows matching every filter
        page: Requested page (1-based)
        limit: Page size

    Returns:
        PaginationMeta with total_pages = ceil(total / limit)
    """
    total_pages = math.ceil(total / limit) if total else 0
    return schemas.PaginationMeta(
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def list_products(db: Session, query: schemas.ProductQuery) -> schemas.PaginatedProducts:
    """
    Return one page of products matching the query plus pagination metadata.

    Pages beyond the last one come back empty, with metadata still computed
    from the true total.

    Args:
        db: Database session
        query: Validated product query

    Returns:
        PaginatedProducts with the page in "data" and PaginationMeta in "meta"
    """
    skip = (query.page - 1) * query.limit
    rows, total = crud.get_products(
        db,
        criteria=build_criteria(query),
        order_by=build_order_by(query),
        skip=skip,
        limit=query.limit,
    )
    logger.debug(f"Product query matched {total} rows, returning {len(rows)} from offset {skip}")
    return schemas.PaginatedProducts(
        data=[schemas.Product.model_validate(row) for row in rows],
        meta=pagination_meta(total, query.page, query.limit),
    )
