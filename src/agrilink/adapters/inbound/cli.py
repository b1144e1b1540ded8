from __future__ import annotations

import json
import sys
from typing import Any

from returns.result import Success

from agrilink.bootstrap import build_usecases, configure_logging
from agrilink.config import get_settings
from agrilink.core.domain.service.token_codec import derive_matrix, render_matrix
from agrilink.core.ports.inbound.create_order import (
    CreateOrderCommand,
    CreateOrderLine,
    CreateOrderUseCase,
)


def run_cli(usecase: CreateOrderUseCase, raw: str, matrix_size: int = 5) -> int:
    """
    raw: JSON string.
    Example:
      {"pickupPoint": "School gate",
       "items": [{"productId": "v1", "qty": 2, "price": 25}]}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except (ValueError, TypeError, AttributeError) as e:
        print(f"invalid_input: {e}")
        return 2

    result = usecase.create_order(cmd)

    if isinstance(result, Success):
        order = result.unwrap()
        print(
            "[ok]",
            {
                "token": order.token.value,
                "items": [
                    {"productId": it.product_id.value, "qty": it.qty, "price": it.price}
                    for it in order.items
                ],
                "pickupPoint": order.pickup_point,
                "createdAt": order.created_at.isoformat(),
                "total": order.total(),
            },
        )
        print(render_matrix(derive_matrix(order.token.value, matrix_size)))
        return 0

    err = result.failure()
    print("[ng]", str(err))
    return 1


def _parse_command(payload: Any) -> CreateOrderCommand:
    if not isinstance(payload, dict):
        raise ValueError("payload must be a JSON object")
    items = payload.get("items", [])
    if not isinstance(items, list):
        raise ValueError("items must be a list")
    # shape only; values are checked by the service
    lines = [
        CreateOrderLine(
            product_id=x.get("productId"),
            qty=x.get("qty"),
            price=x.get("price"),
        )
        for x in items
    ]
    return CreateOrderCommand(items=lines, pickup_point=payload.get("pickupPoint"))


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("usage: agrilink-order '<json>'")
        return 2

    settings = get_settings()
    configure_logging(settings)
    usecases = build_usecases(settings)
    return run_cli(usecases.create_order, argv[0], matrix_size=settings.matrix_size)


if __name__ == "__main__":
    raise SystemExit(main())
