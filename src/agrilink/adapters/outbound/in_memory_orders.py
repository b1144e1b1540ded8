from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict

from returns.result import Failure, Result, Success

from agrilink.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    TokenCollision,
)
from agrilink.core.domain.model.order import Order, Token
from agrilink.core.ports.outbound.orders import OrderRepository


@dataclass
class InMemoryOrderRepository(OrderRepository):
    _store: Dict[str, Order] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def save(self, order: Order) -> Result[Order, OrderError]:
        key = order.token.value
        with self._lock:
            if key in self._store:
                return Failure(
                    TokenCollision(message="token already exists", token=key)
                )
            # order and items are one immutable value: a single assignment
            self._store[key] = order
        return Success(order)

    def get(self, token: Token) -> Result[Order, OrderError]:
        with self._lock:
            order = self._store.get(token.value)
        if order is None:
            return Failure(OrderNotFound(message="order not found", token=token.value))
        return Success(order)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
