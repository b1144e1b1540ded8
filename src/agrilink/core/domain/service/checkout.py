from __future__ import annotations

from agrilink.core.domain.model.cart import Cart
from agrilink.core.ports.inbound.create_order import (
    CreateOrderCommand,
    CreateOrderLine,
)


def cart_to_command(cart: Cart, pickup_point: str | None = None) -> CreateOrderCommand:
    """Checkout payload for a cart; prices are the cart's snapshots."""
    return CreateOrderCommand(
        items=tuple(
            CreateOrderLine(product_id=ln.product_id, qty=ln.qty, price=ln.price)
            for ln in cart.lines
        ),
        pickup_point=pickup_point,
    )
