"""
Read-only inventory analytics.

Every figure is recomputed from the current table contents on each call.
Money is summed as Decimal and rounded half-up to cents.
"""
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import List
from sqlalchemy.orm import Session
from . import crud, models, schemas

CENT = Decimal("0.01")


def round_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def inventory_value(db: Session) -> schemas.InventoryValue:
    """
    Value of stock held by each store.

    Each store's total is rounded to cents first; the grand total is the
    rounded sum of those rounded store totals.

    Args:
        db: Database session

    Returns:
        InventoryValue with one entry per store (stores without products included)
    """
    store_values = []
    for store in crud.get_stores_with_products(db):
        total_value = sum(
            (Decimal(str(product.price)) * product.quantity for product in store.products),
            Decimal("0"),
        )
        store_values.append(
            schemas.StoreInventoryValue(
                store_id=store.id,
                store_name=store.name,
                total_products=len(store.products),
                total_quantity=sum(product.quantity for product in store.products),
                total_value=round_money(total_value),
            )
        )

    grand_total = sum((value.total_value for value in store_values), Decimal("0"))
    return schemas.InventoryValue(stores=store_values, grand_total=round_money(grand_total))


def low_stock_products(db: Session) -> List[schemas.LowStockProduct]:
    """
    Every product at or below its minimum stock, lowest quantity first.

    Each entry carries the shortfall (min_stock - quantity) and the owning store's name.
    """
    products = crud.get_products_with_store(
        db,
        criteria=[models.Product.quantity <= models.Product.min_stock],
        order_by=[models.Product.quantity.asc(), models.Product.id.asc()],
    )
    return [
        schemas.LowStockProduct(
            id=product.id,
            name=product.name,
            sku=product.sku,
            category=product.category,
            quantity=product.quantity,
            min_stock=product.min_stock,
            deficit=product.min_stock - product.quantity,
            store_id=product.store_id,
            store_name=product.store.name,
        )
        for product in products
    ]


def category_summary(db: Session) -> List[schemas.CategorySummary]:
    """
    Roll products up by category label, sorted by label.

    average_price is the plain mean of the listed unit prices in the category,
    not weighted by quantity.
    """
    totals = defaultdict(lambda: {"count": 0, "quantity": 0, "value": Decimal("0"), "price": Decimal("0")})
    for product in crud.get_products_with_store(db):
        price = Decimal(str(product.price))
        entry = totals[product.category]
        entry["count"] += 1
        entry["quantity"] += product.quantity
        entry["value"] += price * product.quantity
        entry["price"] += price

    return [
        schemas.CategorySummary(
            category=category,
            product_count=entry["count"],
            total_quantity=entry["quantity"],
            total_value=round_money(entry["value"]),
            average_price=round_money(entry["price"] / entry["count"]),
        )
        for category, entry in sorted(totals.items())
    ]
