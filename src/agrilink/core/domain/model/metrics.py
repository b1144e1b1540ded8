from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class MetricSample:
    period: str  # e.g. "W1"
    values: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricsSummary:
    totals: Mapping[str, int | float]
    contribution_share: int
    periods: int = 0
