from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Tuple

from returns.pipeline import flow
from returns.pointfree import bind
from returns.result import Failure, Result, Success

from agrilink.core.domain.model.errors import (
    OrderError,
    StorageError,
    TokenCollision,
    ValidationError,
)
from agrilink.core.domain.model.order import (
    Order,
    OrderItem,
    ProductId,
    Token,
    now_utc,
)
from agrilink.core.domain.service.token_codec import derive_token
from agrilink.core.ports.inbound.create_order import (
    CreateOrderCommand,
    CreateOrderUseCase,
)
from agrilink.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger("agrilink.orders")


@dataclass(frozen=True)
class CreateOrderDeps:
    orders: OrderRepository
    new_token: Callable[[], Token] = derive_token
    clock: Callable[[], datetime] = now_utc
    token_retries: int = 1


@dataclass(frozen=True)
class CreateOrderService(CreateOrderUseCase):
    deps: CreateOrderDeps

    def create_order(self, command: CreateOrderCommand) -> Result[Order, OrderError]:
        result = flow(
            command,
            _validate_command,
            bind(self._persist_with_fresh_token),
        )
        if isinstance(result, Success):
            order = result.unwrap()
            logger.info(
                "order created token=%s items=%d total=%d",
                order.token.value,
                len(order.items),
                order.total(),
            )
        return result

    def _persist_with_fresh_token(
        self, cmd: CreateOrderCommand
    ) -> Result[Order, OrderError]:
        # the client price is stored as sent; it is not checked against the catalog
        items = _build_items(cmd)
        attempts = 1 + max(0, self.deps.token_retries)

        for attempt in range(1, attempts + 1):
            order = Order(
                token=self.deps.new_token(),
                items=items,
                created_at=self.deps.clock(),
                pickup_point=cmd.pickup_point,
            )
            saved = self.deps.orders.save(order)
            if not isinstance(saved, Failure):
                return saved

            err = saved.failure()
            if not isinstance(err, TokenCollision):
                return saved
            logger.warning(
                "token collision on %s (attempt %d/%d)",
                err.token,
                attempt,
                attempts,
            )

        return Failure(
            StorageError(
                message=f"could not allocate a unique token after {attempts} attempts"
            )
        )


# ---- pure helpers ----------------------------------------------------------


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_command(
    cmd: CreateOrderCommand,
) -> Result[CreateOrderCommand, OrderError]:
    if not cmd.items:
        return Failure(
            ValidationError("at least one item is required", field="items")
        )
    if cmd.pickup_point is not None and not isinstance(cmd.pickup_point, str):
        return Failure(
            ValidationError("must be a string when provided", field="pickupPoint")
        )

    for i, it in enumerate(cmd.items):
        if not isinstance(it.product_id, str) or not it.product_id.strip():
            return Failure(
                ValidationError("productId is required", field=f"items[{i}].productId")
            )
        if not _is_int(it.qty) or it.qty <= 0:
            return Failure(
                ValidationError("qty must be a positive integer", field=f"items[{i}].qty")
            )
        if not _is_int(it.price) or it.price < 0:
            return Failure(
                ValidationError(
                    "price must be a non-negative integer", field=f"items[{i}].price"
                )
            )

    return Success(cmd)


def _build_items(cmd: CreateOrderCommand) -> Tuple[OrderItem, ...]:
    return tuple(
        OrderItem(product_id=ProductId(it.product_id), qty=it.qty, price=it.price)
        for it in cmd.items
    )
