from __future__ import annotations

from dataclasses import dataclass

from returns.result import Failure, Result

from agrilink.core.domain.model.errors import OrderError, ValidationError
from agrilink.core.domain.model.order import Order, Token
from agrilink.core.ports.inbound.get_order import GetOrderQuery, GetOrderUseCase
from agrilink.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class GetOrderDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class GetOrderService(GetOrderUseCase):
    deps: GetOrderDeps

    def get_order(self, query: GetOrderQuery) -> Result[Order, OrderError]:
        token = query.token.strip().upper()
        if not token:
            return Failure(ValidationError("token is required", field="token"))
        return self.deps.orders.get(Token(token))
