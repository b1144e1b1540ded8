from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Tuple

from agrilink.core.domain.model.product import Product


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    price: int  # snapshot taken when the line was first added
    unit: str
    qty: int = 1

    @staticmethod
    def from_product(product: Product, qty: int = 1) -> "CartLine":
        return CartLine(
            product_id=product.id,
            name=product.name,
            price=product.price,
            unit=product.unit,
            qty=qty,
        )

    def subtotal(self) -> int:
        return self.price * self.qty


@dataclass(frozen=True)
class Cart:
    """
    Immutable pre-order cart. Every mutation returns a new Cart; the caller
    owns the current value and serializes updates.

    Unknown product ids are ignored so that a stale UI event never fails.
    """

    lines: Tuple[CartLine, ...] = ()

    def add(self, line: CartLine) -> "Cart":
        qty = max(1, line.qty)
        for i, ln in enumerate(self.lines):
            if ln.product_id == line.product_id:
                merged = replace(ln, qty=ln.qty + qty)
                return Cart(self.lines[:i] + (merged,) + self.lines[i + 1 :])
        return Cart(self.lines + (replace(line, qty=qty),))

    def set_quantity(self, product_id: str, qty: int) -> "Cart":
        return self._update(product_id, lambda _: max(1, qty))

    def adjust_quantity(self, product_id: str, delta: int) -> "Cart":
        return self._update(product_id, lambda current: max(1, current + delta))

    def remove(self, product_id: str) -> "Cart":
        return Cart(tuple(ln for ln in self.lines if ln.product_id != product_id))

    def clear(self) -> "Cart":
        return Cart()

    def get(self, product_id: str) -> CartLine | None:
        return next((ln for ln in self.lines if ln.product_id == product_id), None)

    def subtotal(self) -> int:
        return sum(ln.subtotal() for ln in self.lines)

    def item_count(self) -> int:
        return sum(ln.qty for ln in self.lines)

    def is_empty(self) -> bool:
        return not self.lines

    def _update(self, product_id: str, new_qty: Callable[[int], int]) -> "Cart":
        if self.get(product_id) is None:
            return self
        return Cart(
            tuple(
                replace(ln, qty=new_qty(ln.qty)) if ln.product_id == product_id else ln
                for ln in self.lines
            )
        )
