"""Reduce a report result to a bounded bar-chart series."""
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from .constants import (
    AXIS_LABEL_MAX,
    CHART_LABEL_JOIN,
    CHART_OTHER_LABEL,
    CHART_TOP_N,
    CHART_TOTAL_LABEL,
    HORIZONTAL_LABEL_THRESHOLD,
    TOOLTIP_LABEL_MAX,
)
from .interpreter import dimension_indices, measure_indices
from .numeric import coerce_number
from .plan import ReportResult


class ChartPoint(BaseModel):
    name: str
    value: float


class ChartSeries(BaseModel):
    points: List[ChartPoint]
    horizontal: bool
    metric_label: str = ""


class NotChartable(BaseModel):
    reason: str = (
        'Charts require at least one "Group by" column and one numeric metric (Count, Sum or Average).'
    )


def is_chartable(result: ReportResult) -> bool:
    return len(result.columns) > 1 and bool(measure_indices(result.columns))


def _label(row: Sequence[str], dims: Sequence[int]) -> str:
    label = CHART_LABEL_JOIN.join(row[i] for i in dims if i < len(row))
    return label or CHART_TOTAL_LABEL


def _value(row: Sequence[str], idx: int) -> float:
    return coerce_number(row[idx]) if idx < len(row) else 0.0


def reduce_chart(
    result: ReportResult,
    metric_index: int,
    dims: Optional[Sequence[int]] = None,
) -> Union[ChartSeries, NotChartable]:
    if not is_chartable(result) or not 0 <= metric_index < len(result.columns):
        return NotChartable()
    if dims is None:
        dims = dimension_indices(result.columns)

    ranked = sorted(result.rows, key=lambda row: _value(row, metric_index), reverse=True)
    top, rest = ranked[:CHART_TOP_N], ranked[CHART_TOP_N:]

    points = [ChartPoint(name=_label(row, dims), value=_value(row, metric_index)) for row in top]
    if rest:
        points.append(ChartPoint(name=CHART_OTHER_LABEL, value=sum(_value(row, metric_index) for row in rest)))

    return ChartSeries(
        points=points,
        horizontal=any(len(p.name) > HORIZONTAL_LABEL_THRESHOLD for p in points),
        metric_label=result.columns[metric_index],
    )


def truncate_label(label: str, limit: int) -> str:
    return label if len(label) <= limit else label[:limit] + "..."


def axis_label(label: str) -> str:
    return truncate_label(label, AXIS_LABEL_MAX)


def tooltip_label(label: str) -> str:
    return truncate_label(label, TOOLTIP_LABEL_MAX)


def format_compact(value: float) -> str:
    if value >= 1000:
        return f"{value / 1000:.1f}k"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
