from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    VEGETABLES = "vegetables"
    EGGS = "eggs"
    MUSHROOMS = "mushrooms"
    CHICKEN = "chicken"
    FISH = "fish"


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    category: Category
    unit: str
    price: int  # minor currency units
    stock: int
