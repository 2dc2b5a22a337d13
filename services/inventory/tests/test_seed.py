"""Tests for the demo data seeder."""
import random
import re

from inventory_api import analytics, crud, seed


class TestSeed:
    def test_generate_sku(self):
        assert seed.generate_sku("Electronics", 0, 0) == "ELE-01-0001"
        assert seed.generate_sku("Home & Garden", 11, 2) == "HOM-03-0012"

    def test_random_quantity_stays_in_range(self):
        rng = random.Random(3)
        for _ in range(200):
            assert 0 <= seed.random_quantity(rng, 10) <= 60
        assert seed.random_quantity(rng, 0) >= 0

    def test_seed_database_creates_stores_and_catalogue(self, db):
        store_count, product_count = seed.seed_database(db, random.Random(1))

        per_store = sum(len(items) for items in seed.CATALOGUE.values())
        assert store_count == len(seed.STORES)
        assert product_count == per_store * len(seed.STORES)
        assert [s.product_count for s in crud.get_stores(db)] == [per_store] * store_count
        assert len(analytics.category_summary(db)) == len(seed.CATALOGUE)

    def test_seeded_skus_are_unique_and_well_formed(self, db):
        seed.seed_database(db, random.Random(2))

        skus = [p.sku for p in crud.get_products_with_store(db)]
        assert len(skus) == len(set(skus))
        assert all(re.fullmatch(r"[A-Z&]{3}-\d{2}-\d{4}", sku) for sku in skus)

    def test_reseeding_replaces_existing_data(self, db):
        seed.seed_database(db, random.Random(4))
        _, product_count = seed.seed_database(db, random.Random(5))

        assert len(crud.get_products_with_store(db)) == product_count
