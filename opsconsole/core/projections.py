"""
SIMULATION RESULT PROJECTIONS

Pure, read-only transformations of one SimulationResult into chart- and
table-ready shapes.

Rules:
- Never mutate the result
- An absent result yields NO_DATA, never an exception
- Callers render a call-to-action for NO_DATA instead of an empty chart
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from opsconsole.core.models import OrderOutcome, SimulationResult


class _NoData:
    """Sentinel for 'no simulation to project'."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"


NO_DATA = _NoData()

LABEL_ON_TIME = "OnTime"
LABEL_LATE = "Late"


@dataclass(frozen=True)
class LabeledSeries:
    labels: Tuple[str, ...]
    values: Tuple[float, ...]
    title: str = ""

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.labels, self.values))


@dataclass(frozen=True)
class OrderPreview:
    rows: Tuple[OrderOutcome, ...]
    has_more: bool
    total: int


@dataclass(frozen=True)
class KpiSummary:
    total_profit: float
    efficiency: float
    on_time_deliveries: int
    total_deliveries: int

    @property
    def profit_label(self) -> str:
        return f"₹{self.total_profit:,.0f}"

    @property
    def efficiency_label(self) -> str:
        return f"{self.efficiency:.2f}%"

    @property
    def deliveries_label(self) -> str:
        return f"{self.on_time_deliveries} / {self.total_deliveries}"


def kpi_summary(result: Optional[SimulationResult]):
    if result is None:
        return NO_DATA
    k = result.kpis
    return KpiSummary(
        total_profit=k.total_profit,
        efficiency=k.efficiency,
        on_time_deliveries=k.on_time_deliveries,
        total_deliveries=k.total_deliveries,
    )


def delivery_chart(result: Optional[SimulationResult]):
    """On-time vs late split: {OnTime: on_time, Late: total - on_time}."""
    if result is None:
        return NO_DATA
    k = result.kpis
    return LabeledSeries(
        labels=(LABEL_ON_TIME, LABEL_LATE),
        values=(k.on_time_deliveries, k.late_deliveries),
        title="Delivery Performance",
    )


def fuel_cost_chart(result: Optional[SimulationResult]):
    """Fuel cost per traffic level, in the server's key order."""
    if result is None:
        return NO_DATA
    breakdown = result.kpis.fuel_cost_breakdown
    return LabeledSeries(
        labels=tuple(level for level, _ in breakdown),
        values=tuple(cost for _, cost in breakdown),
        title="Fuel Cost (Rs)",
    )


def order_preview(result: Optional[SimulationResult], limit: int):
    """First `limit` per-order rows, unmodified, plus whether more exist."""
    if result is None:
        return NO_DATA
    limit = max(limit, 0)
    rows = result.per_order
    return OrderPreview(rows=rows[:limit], has_more=len(rows) > limit, total=len(rows))
