"""
Command line tool that fills the database with demo stores and products.

Usage:
    python -m inventory_api.seed [--seed N] [--keep]
"""
import argparse
import logging
import random
from decimal import Decimal
from typing import Optional, Sequence, Tuple
from sqlalchemy.orm import Session

from . import models, products, schemas, stores
from .config import configure_logging
from .database import SessionLocal, engine

logger = logging.getLogger(__name__)

STORES = [
    {
        "name": "Downtown Electronics Hub",
        "address": "123 Main Street",
        "city": "San Francisco",
        "state": "CA",
        "zip_code": "94102",
        "phone": "(415) 555-0100",
        "email": "downtown@tinyinventory.com",
    },
    {
        "name": "Suburban Home & Garden",
        "address": "456 Oak Avenue",
        "city": "Palo Alto",
        "state": "CA",
        "zip_code": "94301",
        "phone": "(650) 555-0200",
        "email": "suburban@tinyinventory.com",
    },
    {
        "name": "Sports & Outdoors Warehouse",
        "address": "789 Industrial Blvd",
        "city": "Oakland",
        "state": "CA",
        "zip_code": "94607",
        "phone": "(510) 555-0300",
        "email": "warehouse@tinyinventory.com",
    },
]

# category -> (name, price, min_stock)
CATALOGUE = {
    "Electronics": [
        ("Wireless Bluetooth Headphones", "79.99", 15),
        ("USB-C Charging Cable 6ft", "14.99", 50),
        ("Portable Power Bank 10000mAh", "34.99", 25),
        ("Mechanical Gaming Keyboard", "129.99", 10),
        ("Wireless Mouse", "29.99", 30),
        ("4K HDMI Cable 10ft", "19.99", 40),
    ],
    "Clothing": [
        ("Cotton T-Shirt Basic", "19.99", 50),
        ("Denim Jeans Classic Fit", "49.99", 25),
        ("Hooded Sweatshirt", "39.99", 30),
        ("Athletic Running Shorts", "24.99", 35),
        ("Wool Blend Socks 3-Pack", "12.99", 60),
    ],
    "Home & Garden": [
        ("Stainless Steel Water Bottle", "24.99", 40),
        ("LED Desk Lamp Adjustable", "44.99", 20),
        ("Indoor Plant Pot Ceramic", "18.99", 35),
        ("Garden Tool Set 5-Piece", "32.99", 15),
        ("Throw Blanket Fleece", "29.99", 25),
    ],
    "Sports": [
        ("Yoga Mat Premium", "34.99", 20),
        ("Resistance Bands Set", "19.99", 30),
        ("Foam Roller 18-inch", "24.99", 25),
        ("Jump Rope Speed", "12.99", 40),
        ("Dumbbell Set 20lb", "54.99", 10),
    ],
    "Books": [
        ("Programming Fundamentals Guide", "39.99", 15),
        ("Modern Web Development", "44.99", 12),
        ("Data Science Handbook", "49.99", 10),
        ("Business Strategy Essentials", "29.99", 20),
        ("Creative Writing Workshop", "24.99", 18),
    ],
}


def generate_sku(category: str, index: int, store_index: int) -> str:
    """Build a SKU like ELE-01-0001 from category, store position and item position."""
    return f"{category[:3].upper()}-{store_index + 1:02d}-{index + 1:04d}"


def random_quantity(rng: random.Random, min_stock: int) -> int:
    # 70% comfortably stocked, 30% at or below the threshold
    if rng.random() < 0.7:
        return min_stock + rng.randint(1, 50)
    return rng.randint(0, max(min_stock - 1, 0))


def clear_database(db: Session) -> None:
    db.query(models.Product).delete()
    db.query(models.Store).delete()
    db.commit()


def seed_database(db: Session, rng: random.Random, clear: bool = True) -> Tuple[int, int]:
    """
    Create the demo stores and, for each, the full product catalogue.

    Args:
        db: Database session
        rng: Random source for stock levels
        clear: Delete existing products and stores first

    Returns:
        Tuple of (stores created, products created)
    """
    if clear:
        clear_database(db)
        logger.info("Cleared existing stores and products")

    created_products = 0
    for store_index, store_data in enumerate(STORES):
        store = stores.create_store(db, schemas.StoreCreate(**store_data))
        count = 0
        for category, templates in CATALOGUE.items():
            for index, (name, price, min_stock) in enumerate(templates):
                products.create_product(
                    db,
                    schemas.ProductCreate(
                        name=name,
                        description=f"High-quality {name.lower()} for everyday use.",
                        sku=generate_sku(category, index, store_index),
                        category=category,
                        price=Decimal(price),
                        quantity=random_quantity(rng, min_stock),
                        min_stock=min_stock,
                        store_id=store.id,
                    ),
                )
                count += 1
        logger.info(f"Created {count} products for {store.name}")
        created_products += count

    return len(STORES), created_products


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the inventory database with demo data")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for stock levels")
    parser.add_argument("--keep", action="store_true", help="Keep existing stores and products")
    args = parser.parse_args(argv)

    configure_logging()
    models.Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        logger.info("Seeding database...")
        store_count, product_count = seed_database(db, random.Random(args.seed), clear=not args.keep)
        logger.info(f"Seeding complete! Created {store_count} stores and {product_count} products.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
