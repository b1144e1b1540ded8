from __future__ import annotations

from typing import Protocol, Sequence

from agrilink.core.domain.model.product import Category, Product


class ProductCatalog(Protocol):
    def list(self, category: Category | None = None) -> Sequence[Product]: ...

    def get(self, product_id: str) -> Product | None: ...
