from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from agrilink.core.domain.model.errors import OrderError
from agrilink.core.domain.model.order import Order


@dataclass(frozen=True)
class CreateOrderLine:
    product_id: str
    qty: int
    price: int


@dataclass(frozen=True)
class CreateOrderCommand:
    items: Sequence[CreateOrderLine]
    pickup_point: str | None = None


class CreateOrderUseCase(Protocol):
    def create_order(self, command: CreateOrderCommand) -> Result[Order, OrderError]: ...
