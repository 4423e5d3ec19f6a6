"""Chart definitions for the metrics published by the ccache collector."""

from typing import Dict, List, Literal, Mapping

from pydantic import BaseModel, Field

from .utils.metrics import PRECISION


PRIORITY = 69696


class Dimension(BaseModel):
    """One series on a chart, keyed by a metric name."""
    id: str
    name: str
    divisor: int = Field(default=1, ge=1)


class Chart(BaseModel):
    """Chart metadata handed to the monitoring host."""
    id: str
    title: str
    units: str
    family: str = "ccache"
    context: str
    priority: int
    chart_type: Literal["line", "stacked", "area"] = "line"
    dimensions: List[Dimension]


CHARTS: List[Chart] = [
    Chart(
        id="local_storage",
        title="Local Storage Hits/Misses",
        units="count",
        context="ccache.local_storage",
        priority=PRIORITY + 1,
        chart_type="stacked",
        dimensions=[
            Dimension(id="local_storage_hit", name="hits"),
            Dimension(id="local_storage_miss", name="misses"),
        ],
    ),
    Chart(
        id="local_storage_percentage",
        title="Local Storage Hits/Misses Percentage",
        units="percentage",
        context="ccache.local_storage_percentage",
        priority=PRIORITY + 2,
        chart_type="stacked",
        dimensions=[
            Dimension(id="local_storage_hit_percentage", name="hit", divisor=PRECISION),
            Dimension(id="local_storage_miss_percentage", name="miss", divisor=PRECISION),
        ],
    ),
    Chart(
        id="cache_size",
        title="Cache size",
        units="bytes",
        context="ccache.cache_size",
        priority=PRIORITY + 3,
        dimensions=[Dimension(id="cache_size", name="size")],
    ),
    Chart(
        id="files_in_cache",
        title="Files in cache",
        units="count",
        context="ccache.files_in_cache",
        priority=PRIORITY + 4,
        dimensions=[Dimension(id="files_in_cache", name="files")],
    ),
]


def charts() -> List[Chart]:
    """Return a private copy of the chart definitions."""
    return [chart.model_copy(deep=True) for chart in CHARTS]


def render_values(metrics: Mapping[str, int]) -> Dict[str, Dict[str, float]]:
    """
    Scale raw metric values into chart units.

    Args:
        metrics: Metric set returned by a collector

    Returns:
        Dict mapping chart id to ``{dimension name: scaled value}``;
        dimensions absent from ``metrics`` are omitted
    """
    rendered = {}
    for chart in CHARTS:
        rendered[chart.id] = {
            dim.name: metrics[dim.id] / dim.divisor
            for dim in chart.dimensions
            if dim.id in metrics
        }
    return rendered
