from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic.alias_generators import to_camel
from returns.result import Success

from agrilink.bootstrap import UseCases
from agrilink.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    StorageError,
    ValidationError,
)
from agrilink.core.domain.model.metrics import MetricSample
from agrilink.core.domain.model.order import Order
from agrilink.core.domain.model.product import Category, Product
from agrilink.core.domain.service.token_codec import derive_matrix
from agrilink.core.ports.inbound.create_order import (
    CreateOrderCommand,
    CreateOrderLine,
)
from agrilink.core.ports.inbound.get_order import GetOrderQuery
from agrilink.core.ports.inbound.summarize_metrics import (
    MetricsReport,
    SummarizeMetricsQuery,
)

logger = logging.getLogger("agrilink.web")

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemIn(CamelModel):
    product_id: StrictStr = Field(examples=["v1"])
    qty: StrictInt = Field(examples=[2])
    price: StrictInt = Field(examples=[25])


class CreateOrderRequest(CamelModel):
    items: list[OrderItemIn]
    pickup_point: StrictStr | None = Field(None, examples=["School gate"])


class OrderItemOut(CamelModel):
    product_id: str
    qty: int
    price: int


class OrderResponse(CamelModel):
    token: str
    items: list[OrderItemOut]
    pickup_point: str | None = None
    created_at: datetime
    total: int


class ProductOut(CamelModel):
    id: str
    name: str
    category: Category
    unit: str
    price: int
    stock: int


class CodeResponse(CamelModel):
    payload: str
    size: int
    cells: list[list[int]]


class MetricSampleOut(CamelModel):
    period: str
    values: dict[str, Any]


class MetricsResponse(CamelModel):
    samples: list[MetricSampleOut]
    totals: dict[str, int | float]
    contribution_share: int
    periods: int


class ErrorResponse(BaseModel):
    type: str
    message: str
    field: str | None = None
    details: list[dict[str, Any]] | None = None


# ---- Mapping helpers -------------------------------------------------------


def _to_command(req: CreateOrderRequest) -> CreateOrderCommand:
    return CreateOrderCommand(
        items=tuple(
            CreateOrderLine(product_id=it.product_id, qty=it.qty, price=it.price)
            for it in req.items
        ),
        pickup_point=req.pickup_point,
    )


def _to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        token=order.token.value,
        items=[
            OrderItemOut(product_id=it.product_id.value, qty=it.qty, price=it.price)
            for it in order.items
        ],
        pickup_point=order.pickup_point,
        created_at=order.created_at,
        total=order.total(),
    )


def _to_product_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        name=p.name,
        category=p.category,
        unit=p.unit,
        price=p.price,
        stock=p.stock,
    )


def _to_metrics_response(report: MetricsReport) -> MetricsResponse:
    def sample_out(s: MetricSample) -> MetricSampleOut:
        return MetricSampleOut(period=s.period, values=dict(s.values))

    return MetricsResponse(
        samples=[sample_out(s) for s in report.samples],
        totals=dict(report.summary.totals),
        contribution_share=report.summary.contribution_share,
        periods=report.summary.periods,
    )


def _map_error_to_http(err: OrderError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(
            type=type(err).__name__, message=err.message, field=err.field
        )

    if isinstance(err, OrderNotFound):
        return 404, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, StorageError):
        return 500, ErrorResponse(type=type(err).__name__, message=str(err))

    return 500, ErrorResponse(type=type(err).__name__, message=str(err))


def _error_response(err: OrderError) -> JSONResponse:
    status, body = _map_error_to_http(err)
    if status >= 500:
        logger.error("request failed: %s", err)
    else:
        logger.info("request rejected: %s", err)
    return JSONResponse(status_code=status, content=body.model_dump())


# ---- App factory -----------------------------------------------------------


def create_app(usecases: UseCases) -> FastAPI:
    app = FastAPI(title="agrilink")

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unexpected error")
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/products", response_model=list[ProductOut])
    def list_products(category: Category | None = Query(None)) -> Any:
        return [_to_product_out(p) for p in usecases.catalog.list(category)]

    @app.post(
        "/api/orders",
        response_model=OrderResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    def create_order(req: CreateOrderRequest, response: Response) -> Any:
        result = usecases.create_order.create_order(_to_command(req))

        if isinstance(result, Success):
            order = result.unwrap()
            response.headers["Location"] = f"/api/orders/{order.token.value}"
            return _to_order_response(order)

        return _error_response(result.failure())

    @app.get(
        "/api/orders/{token}",
        response_model=OrderResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    def get_order(token: str) -> Any:
        result = usecases.get_order.get_order(GetOrderQuery(token=token))

        if isinstance(result, Success):
            return _to_order_response(result.unwrap())

        return _error_response(result.failure())

    @app.get(
        "/api/orders/{token}/code",
        response_model=CodeResponse,
        responses={404: {"model": ErrorResponse}},
    )
    def get_order_code(
        token: str, size: int | None = Query(None, ge=1, le=64)
    ) -> Any:
        result = usecases.get_order.get_order(GetOrderQuery(token=token))

        if isinstance(result, Success):
            payload = result.unwrap().token.value
            n = size or usecases.matrix_size
            cells = derive_matrix(payload, n)
            return CodeResponse(
                payload=payload, size=n, cells=[list(row) for row in cells]
            )

        return _error_response(result.failure())

    @app.get(
        "/api/metrics",
        response_model=MetricsResponse,
        responses={400: {"model": ErrorResponse}},
    )
    def get_metrics(
        limit: int | None = Query(None),
        series: list[str] | None = Query(None),
    ) -> Any:
        result = usecases.summarize_metrics.summarize(
            SummarizeMetricsQuery(
                limit=usecases.metrics_window if limit is None else limit,
                series=series,
            )
        )

        if isinstance(result, Success):
            return _to_metrics_response(result.unwrap())

        return _error_response(result.failure())

    return app
