from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import MAX_EMAX, ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Iterable, Sequence, Tuple

from returns.result import Failure, Result

from agrilink.core.domain.model.errors import OrderError, ValidationError
from agrilink.core.domain.model.metrics import MetricSample, MetricsSummary
from agrilink.core.ports.inbound.summarize_metrics import (
    MetricsReport,
    SummarizeMetricsQuery,
    SummarizeMetricsUseCase,
)
from agrilink.core.ports.outbound.metrics import MetricsFeed

logger = logging.getLogger("agrilink.metrics")

REVENUE_SERIES: Tuple[str, str] = ("surplus_revenue", "subscriptions")
DEFAULT_SHARE = Decimal("0.8")


def summarize(
    samples: Iterable[MetricSample],
    series: Sequence[str] | None = None,
    *,
    revenue_series: Tuple[str, str] = REVENUE_SERIES,
    share: Decimal = DEFAULT_SHARE,
) -> MetricsSummary:
    """
    Totals per series and the contribution share of the two revenue series.

    A series missing from a sample, or holding a non-numeric value, adds 0.
    When `series` is None every series seen in the samples is totalled.
    The share is rounded to a whole unit, half away from zero.
    """
    sums: Dict[str, int | float] = {}
    periods = 0
    for sample in samples:
        periods += 1
        for name, raw in _items(sample):
            sums[name] = sums.get(name, 0) + _numeric(raw)

    names = list(sums) if series is None else list(series)
    totals = {name: _finite(sums.get(name, 0)) for name in names}

    revenue = _finite(sum(_finite(sums.get(name, 0)) for name in revenue_series))
    return MetricsSummary(
        totals=totals,
        contribution_share=_contribution(revenue, share),
        periods=periods,
    )


def _contribution(revenue: int | float, share: Decimal) -> int:
    amount = Decimal(revenue) if isinstance(revenue, int) else Decimal(str(revenue))
    rate = Decimal(str(share))
    # exact product, whatever the magnitude of the operands
    digits = len(amount.as_tuple().digits) + len(rate.as_tuple().digits)
    scale = max(0, amount.adjusted() + rate.adjusted() + 2)
    with localcontext() as ctx:
        ctx.prec = max(28, digits + scale + 2)
        ctx.Emax = MAX_EMAX
        contribution = (amount * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(contribution)


def _items(sample: object) -> Iterable[Tuple[str, object]]:
    values = getattr(sample, "values", None)
    if not hasattr(values, "items"):
        return ()
    return ((k, v) for k, v in values.items() if isinstance(k, str))


def _finite(value: int | float) -> int | float:
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value


def _numeric(value: object) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return 0
    if isinstance(value, Decimal):
        if not value.is_finite():
            return 0
        return int(value) if value == value.to_integral_value() else float(value)
    return _finite(value)


@dataclass(frozen=True)
class SummarizeMetricsDeps:
    feed: MetricsFeed
    share: Decimal = DEFAULT_SHARE
    revenue_series: Tuple[str, str] = REVENUE_SERIES
    max_limit: int = 52


@dataclass(frozen=True)
class SummarizeMetricsService(SummarizeMetricsUseCase):
    deps: SummarizeMetricsDeps

    def summarize(
        self, query: SummarizeMetricsQuery
    ) -> Result[MetricsReport, OrderError]:
        if query.limit <= 0:
            return Failure(ValidationError("limit must be > 0", field="limit"))
        if query.limit > self.deps.max_limit:
            return Failure(
                ValidationError(
                    f"limit must be <= {self.deps.max_limit}", field="limit"
                )
            )

        return self.deps.feed.recent(query.limit).map(
            lambda samples: self._report(tuple(samples), query.series)
        )

    def _report(
        self, samples: Tuple[MetricSample, ...], series: Sequence[str] | None
    ) -> MetricsReport:
        summary = summarize(
            samples,
            series,
            revenue_series=self.deps.revenue_series,
            share=self.deps.share,
        )
        logger.debug(
            "summarized %d samples, contribution=%d",
            summary.periods,
            summary.contribution_share,
        )
        return MetricsReport(samples=samples, summary=summary)
