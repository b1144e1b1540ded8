from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from returns.result import Failure, Result, Success
from sqlalchemy import (
    DateTime,
    Engine,
    ForeignKey,
    Integer,
    String,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
    selectinload,
    sessionmaker,
)
from sqlalchemy.pool import StaticPool

from agrilink.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    StorageError,
    TokenCollision,
)
from agrilink.core.domain.model.order import Order, OrderItem, ProductId, Token
from agrilink.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger("agrilink.storage")


class Base(DeclarativeBase):
    pass


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    token: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    pickup_point: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    items: Mapped[List["OrderItemRow"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemRow.id",
    )


class OrderItemRow(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped[OrderRow] = relationship(back_populates="items")


def make_engine(url: str) -> Engine:
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url)


@dataclass
class SqlAlchemyOrderRepository(OrderRepository):
    engine: Engine

    def __post_init__(self) -> None:
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)

    @staticmethod
    def from_url(url: str) -> "SqlAlchemyOrderRepository":
        repo = SqlAlchemyOrderRepository(make_engine(url))
        repo.create_schema()
        return repo

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def save(self, order: Order) -> Result[Order, OrderError]:
        row = _to_row(order)
        try:
            # order row and item rows commit together or not at all
            with self._sessions.begin() as session:
                session.add(row)
        except IntegrityError:
            if self._token_exists(order.token):
                return Failure(
                    TokenCollision(
                        message="token already exists", token=order.token.value
                    )
                )
            logger.exception("integrity error saving order %s", order.token.value)
            return Failure(StorageError(message="could not store order"))
        except SQLAlchemyError:
            logger.exception("storage failure saving order %s", order.token.value)
            return Failure(StorageError(message="could not store order"))
        return Success(order)

    def get(self, token: Token) -> Result[Order, OrderError]:
        stmt = (
            select(OrderRow)
            .where(OrderRow.token == token.value)
            .options(selectinload(OrderRow.items))
        )
        try:
            with self._sessions() as session:
                row = session.scalars(stmt).one_or_none()
                order = _to_domain(row) if row is not None else None
        except SQLAlchemyError:
            logger.exception("storage failure loading order %s", token.value)
            return Failure(StorageError(message="could not load order"))

        if order is None:
            return Failure(OrderNotFound(message="order not found", token=token.value))
        return Success(order)

    def _token_exists(self, token: Token) -> bool:
        try:
            with self._sessions() as session:
                found = session.scalar(
                    select(OrderRow.id).where(OrderRow.token == token.value)
                )
        except SQLAlchemyError:
            return False
        return found is not None


def _to_row(order: Order) -> OrderRow:
    return OrderRow(
        token=order.token.value,
        pickup_point=order.pickup_point,
        created_at=order.created_at,
        items=[
            OrderItemRow(product_id=it.product_id.value, qty=it.qty, price=it.price)
            for it in order.items
        ],
    )


def _to_domain(row: OrderRow) -> Order:
    created_at = row.created_at
    if created_at.tzinfo is None:
        # sqlite drops the offset; values are always written in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Order(
        token=Token(row.token),
        items=tuple(
            OrderItem(product_id=ProductId(it.product_id), qty=it.qty, price=it.price)
            for it in row.items
        ),
        created_at=created_at,
        pickup_point=row.pickup_point,
    )
