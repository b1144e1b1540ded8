from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Tuple


@dataclass(frozen=True)
class Token:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProductId:
    value: str


@dataclass(frozen=True)
class OrderItem:
    product_id: ProductId
    qty: int
    price: int  # minor currency units

    def subtotal(self) -> int:
        return self.price * self.qty


@dataclass(frozen=True)
class Order:
    token: Token
    items: Tuple[OrderItem, ...]
    created_at: datetime
    pickup_point: str | None = None

    def total(self) -> int:
        return sum(it.subtotal() for it in self.items)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
