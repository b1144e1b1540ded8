from __future__ import annotations

from typing import Protocol

from returns.result import Result

from agrilink.core.domain.model.errors import OrderError
from agrilink.core.domain.model.order import Order, Token


class OrderRepository(Protocol):
    """
    save() writes the order and all of its items atomically.
    A token that is already stored must fail with TokenCollision and leave
    nothing behind.
    """

    def save(self, order: Order) -> Result[Order, OrderError]: ...

    def get(self, token: Token) -> Result[Order, OrderError]: ...
