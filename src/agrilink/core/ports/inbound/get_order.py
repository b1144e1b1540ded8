from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from agrilink.core.domain.model.errors import OrderError
from agrilink.core.domain.model.order import Order


@dataclass(frozen=True)
class GetOrderQuery:
    token: str


class GetOrderUseCase(Protocol):
    def get_order(self, query: GetOrderQuery) -> Result[Order, OrderError]: ...
