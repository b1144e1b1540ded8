from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(OrderError):
    field: str | None = None

    def __str__(self) -> str:  # pragma: no cover
        if self.field is None:
            return self.message
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class StorageError(OrderError):
    pass


@dataclass(frozen=True)
class TokenCollision(StorageError):
    token: str

    def __str__(self) -> str:  # pragma: no cover
        return f"token_collision: {self.token} ({self.message})"


@dataclass(frozen=True)
class OrderNotFound(StorageError):
    token: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.token} ({self.message})"
