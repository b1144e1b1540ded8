from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest
from returns.result import Failure, Success
from sqlalchemy import func, select

from agrilink.adapters.outbound.sqlalchemy_orders import (
    OrderItemRow,
    OrderRow,
    SqlAlchemyOrderRepository,
)
from agrilink.core.domain.model.errors import OrderNotFound, TokenCollision
from agrilink.core.domain.model.order import Order, OrderItem, ProductId, Token
from agrilink.core.domain.service.create_order_service import (
    CreateOrderDeps,
    CreateOrderService,
)
from agrilink.core.ports.inbound.create_order import (
    CreateOrderCommand,
    CreateOrderLine,
)

CREATED = datetime(2025, 3, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    return SqlAlchemyOrderRepository.from_url("sqlite://")


def _order(token="AGR-AAAAAA", pickup_point=None):
    return Order(
        token=Token(token),
        items=(
            OrderItem(ProductId("v1"), qty=2, price=25),
            OrderItem(ProductId("e1"), qty=1, price=65),
        ),
        created_at=CREATED,
        pickup_point=pickup_point,
    )


def _count(repo, model):
    with repo._sessions() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_save_and_get_roundtrip(repo):
    order = _order(pickup_point="School gate")
    assert isinstance(repo.save(order), Success)

    loaded = repo.get(Token("AGR-AAAAAA")).unwrap()
    assert loaded == order
    assert loaded.created_at.tzinfo is not None


def test_get_unknown_token(repo):
    result = repo.get(Token("AGR-ZZZZZZ"))
    assert isinstance(result, Failure)
    assert isinstance(result.failure(), OrderNotFound)


def test_duplicate_token_is_a_collision_and_writes_nothing(repo):
    repo.save(_order()).unwrap()
    result = repo.save(_order())

    assert isinstance(result.failure(), TokenCollision)
    assert _count(repo, OrderRow) == 1
    assert _count(repo, OrderItemRow) == 2


def test_service_retries_collision_against_database(repo):
    tokens = iter(["AGR-AAAAAA", "AGR-AAAAAA", "AGR-BBBBBB"])
    svc = CreateOrderService(
        CreateOrderDeps(orders=repo, new_token=lambda: Token(next(tokens)))
    )
    cmd = CreateOrderCommand(items=[CreateOrderLine("v1", 2, 25)])

    assert svc.create_order(cmd).unwrap().token.value == "AGR-AAAAAA"
    assert svc.create_order(cmd).unwrap().token.value == "AGR-BBBBBB"
    assert _count(repo, OrderRow) == 2
    assert _count(repo, OrderItemRow) == 2


def test_concurrent_creates_on_file_database(tmp_path):
    repo = SqlAlchemyOrderRepository.from_url(f"sqlite:///{tmp_path / 'orders.db'}")
    svc = CreateOrderService(CreateOrderDeps(orders=repo))
    commands = [
        CreateOrderCommand(items=[CreateOrderLine("v1", 1, 25)]),
        CreateOrderCommand(items=[CreateOrderLine("e1", 3, 65)], pickup_point="LINE"),
    ]

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(svc.create_order, commands))

    orders = [r.unwrap() for r in results]
    assert orders[0].token != orders[1].token
    for order in orders:
        assert repo.get(order.token).unwrap().items == order.items
