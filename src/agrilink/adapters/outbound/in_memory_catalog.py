from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from agrilink.core.domain.model.product import Category, Product
from agrilink.core.ports.outbound.catalog import ProductCatalog

DEMO_INVENTORY = (
    Product("v1", "Kale (Organic)", Category.VEGETABLES, "bunch", 25, 28),
    Product("v2", "Cucumber", Category.VEGETABLES, "kg", 30, 14),
    Product("v3", "Tomato (Cherry)", Category.VEGETABLES, "box", 45, 10),
    Product("e1", "Free-range Eggs", Category.EGGS, "dozen", 65, 22),
    Product("m1", "Oyster Mushroom", Category.MUSHROOMS, "kg", 90, 7),
    Product("c1", "Chicken (Cut)", Category.CHICKEN, "kg", 120, 5),
    Product("f1", "Tilapia", Category.FISH, "kg", 95, 9),
)


@dataclass
class InMemoryProductCatalog(ProductCatalog):
    products_by_id: Dict[str, Product]

    @staticmethod
    def from_products(products: Sequence[Product]) -> "InMemoryProductCatalog":
        return InMemoryProductCatalog(products_by_id={p.id: p for p in products})

    def list(self, category: Category | None = None) -> Sequence[Product]:
        products = sorted(self.products_by_id.values(), key=lambda p: p.name)
        if category is not None:
            products = [p for p in products if p.category == category]
        return tuple(products)

    def get(self, product_id: str) -> Product | None:
        return self.products_by_id.get(product_id)
