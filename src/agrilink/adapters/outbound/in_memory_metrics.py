from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from returns.result import Result, Success

from agrilink.core.domain.model.errors import OrderError
from agrilink.core.domain.model.metrics import MetricSample
from agrilink.core.ports.outbound.metrics import MetricsFeed

# weekly harvest (kg / dozen) and revenue (THB)
DEMO_SAMPLES = (
    MetricSample(
        "W1",
        {
            "vegetables": 42,
            "eggs": 16,
            "mushrooms": 7,
            "surplus_revenue": 2150,
            "subscriptions": 900,
        },
    ),
    MetricSample(
        "W2",
        {
            "vegetables": 38,
            "eggs": 18,
            "mushrooms": 9,
            "surplus_revenue": 1880,
            "subscriptions": 980,
        },
    ),
    MetricSample(
        "W3",
        {
            "vegetables": 54,
            "eggs": 20,
            "mushrooms": 8,
            "surplus_revenue": 2670,
            "subscriptions": 1100,
        },
    ),
    MetricSample(
        "W4",
        {
            "vegetables": 49,
            "eggs": 22,
            "mushrooms": 10,
            "surplus_revenue": 2390,
            "subscriptions": 1150,
        },
    ),
)


@dataclass
class InMemoryMetricsFeed(MetricsFeed):
    samples: List[MetricSample] = field(default_factory=list)

    def append(self, sample: MetricSample) -> None:
        self.samples.append(sample)

    def recent(self, limit: int) -> Result[Sequence[MetricSample], OrderError]:
        if limit <= 0:
            return Success(())
        return Success(tuple(self.samples[-limit:]))
