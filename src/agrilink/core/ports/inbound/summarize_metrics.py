from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from agrilink.core.domain.model.errors import OrderError
from agrilink.core.domain.model.metrics import MetricSample, MetricsSummary


@dataclass(frozen=True)
class SummarizeMetricsQuery:
    limit: int = 4
    series: Sequence[str] | None = None


@dataclass(frozen=True)
class MetricsReport:
    samples: Sequence[MetricSample]
    summary: MetricsSummary


class SummarizeMetricsUseCase(Protocol):
    def summarize(
        self, query: SummarizeMetricsQuery
    ) -> Result[MetricsReport, OrderError]: ...
