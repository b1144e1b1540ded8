from __future__ import annotations

import logging
from dataclasses import dataclass

from agrilink.adapters.outbound.in_memory_catalog import (
    DEMO_INVENTORY,
    InMemoryProductCatalog,
)
from agrilink.adapters.outbound.in_memory_metrics import (
    DEMO_SAMPLES,
    InMemoryMetricsFeed,
)
from agrilink.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from agrilink.adapters.outbound.sqlalchemy_orders import SqlAlchemyOrderRepository
from agrilink.config import Settings, get_settings
from agrilink.core.domain.service.create_order_service import (
    CreateOrderDeps,
    CreateOrderService,
)
from agrilink.core.domain.service.get_order_service import (
    GetOrderDeps,
    GetOrderService,
)
from agrilink.core.domain.service.metrics_service import (
    SummarizeMetricsDeps,
    SummarizeMetricsService,
)
from agrilink.core.ports.outbound.catalog import ProductCatalog
from agrilink.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger("agrilink")


@dataclass(frozen=True)
class UseCases:
    create_order: CreateOrderService
    get_order: GetOrderService
    summarize_metrics: SummarizeMetricsService
    catalog: ProductCatalog
    matrix_size: int = 5
    metrics_window: int = 4


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_order_repository(settings: Settings) -> OrderRepository:
    if settings.database_url:
        logger.info("orders stored via SQLAlchemy")
        return SqlAlchemyOrderRepository.from_url(settings.database_url)
    logger.info("orders stored in memory")
    return InMemoryOrderRepository()


def build_usecases(settings: Settings | None = None) -> UseCases:
    settings = settings or get_settings()
    orders = build_order_repository(settings)
    catalog = InMemoryProductCatalog.from_products(DEMO_INVENTORY)
    feed = InMemoryMetricsFeed(samples=list(DEMO_SAMPLES))

    create_order = CreateOrderService(
        CreateOrderDeps(orders=orders, token_retries=settings.token_retries)
    )
    get_order = GetOrderService(GetOrderDeps(orders=orders))
    summarize_metrics = SummarizeMetricsService(
        SummarizeMetricsDeps(feed=feed, share=settings.contribution_share)
    )

    return UseCases(
        create_order=create_order,
        get_order=get_order,
        summarize_metrics=summarize_metrics,
        catalog=catalog,
        matrix_size=settings.matrix_size,
        metrics_window=settings.metrics_window,
    )
