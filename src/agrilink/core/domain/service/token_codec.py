from __future__ import annotations

import random
import secrets
import string
from typing import Tuple

from agrilink.core.domain.model.cart import Cart
from agrilink.core.domain.model.order import Token

TOKEN_PREFIX = "AGR-"
TOKEN_LENGTH = 6
TOKEN_ALPHABET = string.ascii_uppercase + string.digits

MATRIX_SIZE = 5

# Frozen forever: changing any of these changes every printed code.
_MASK = 0xFFFFFFFF
_HASH_MULTIPLIER = 31

Matrix = Tuple[Tuple[int, ...], ...]

_system_random = secrets.SystemRandom()


def derive_token(rng: random.Random | None = None) -> Token:
    """
    New opaque order token, e.g. ``AGR-7KQ2ZD``.

    Not derived from order content; storage enforces uniqueness.
    """
    source = rng or _system_random
    body = "".join(source.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return Token(TOKEN_PREFIX + body)


def derive_matrix(payload: str, size: int = MATRIX_SIZE) -> Matrix:
    """
    Deterministic size x size bit grid (row-major) for a payload.

    The payload is folded as UTF-16 code units with ``h = h * 31 + c`` (32 bit),
    then every cell runs one xorshift32 round and takes the low bit.
    """
    if size < 1:
        raise ValueError(f"matrix size must be >= 1, got {size}")

    h = _fold(payload)
    bits = []
    for _ in range(size * size):
        h = _xorshift32(h)
        bits.append(h & 1)
    return tuple(tuple(bits[r * size : (r + 1) * size]) for r in range(size))


def cart_payload(cart: Cart) -> str:
    if cart.is_empty():
        return ""
    return TOKEN_PREFIX + "|".join(f"{ln.product_id}:{ln.qty}" for ln in cart.lines)


def render_matrix(matrix: Matrix, on: str = "##", off: str = "  ") -> str:
    return "\n".join("".join(on if b else off for b in row) for row in matrix)


def _fold(payload: str) -> int:
    raw = payload.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        h = (h * _HASH_MULTIPLIER + unit) & _MASK
    return h


def _xorshift32(h: int) -> int:
    h ^= (h << 13) & _MASK
    h ^= h >> 17
    h ^= (h << 5) & _MASK
    return h
