from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from agrilink.core.domain.model.errors import OrderError
from agrilink.core.domain.model.metrics import MetricSample


class MetricsFeed(Protocol):
    def recent(self, limit: int) -> Result[Sequence[MetricSample], OrderError]:
        """Most recent `limit` samples, oldest first."""
        ...
