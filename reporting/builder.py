"""Report configuration as a pure state reducer.

Every operation takes a ``BuilderState`` and returns a new one. Invalid input is a
silent no-op so the state is always submittable.
"""
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .constants import REPORT_ROW_LIMIT
from .plan import CountMetric, Filter, FilterOp, Metric, MetricOp, ReportConfig, make_metric


class FilterDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = ""
    op: FilterOp = FilterOp.EQUALS
    value: str = ""


class BuilderState(BaseModel):
    model_config = ConfigDict(frozen=True)

    columns: Tuple[str, ...] = ()
    group_by: Tuple[str, ...] = ()
    metrics: Tuple[Metric, ...] = ()
    filters: Tuple[Filter, ...] = ()
    draft: FilterDraft = FilterDraft()


def new_state(columns: Iterable[str]) -> BuilderState:
    return BuilderState(columns=tuple(columns))


def add_dimension(state: BuilderState, column: str) -> BuilderState:
    if column not in state.columns or column in state.group_by:
        return state
    return state.model_copy(update={"group_by": state.group_by + (column,)})


def remove_dimension(state: BuilderState, column: str) -> BuilderState:
    if column not in state.group_by:
        return state
    return state.model_copy(update={"group_by": tuple(c for c in state.group_by if c != column)})


def can_add_count(state: BuilderState) -> bool:
    return not any(m.op == "count" for m in state.metrics)


def available_metric_fields(state: BuilderState, op: str, numeric_columns: Iterable[str]) -> List[str]:
    """Numeric columns not yet used with ``op``; what the UI offers for sum/avg."""
    used = {m.field for m in state.metrics if m.op == op}
    return [c for c in numeric_columns if c in state.columns and c not in used]


def add_metric(state: BuilderState, op: MetricOp, field: Optional[str] = None) -> BuilderState:
    if op == "count":
        if not can_add_count(state):
            return state
        metric = CountMetric()
    elif op in ("sum", "avg"):
        if not field or field not in state.columns:
            return state
        if any(m.op == op and m.field == field for m in state.metrics):
            return state
        metric = make_metric(op, field)
    else:
        return state
    return state.model_copy(update={"metrics": state.metrics + (metric,)})


def _filter_op(op) -> Optional[FilterOp]:
    try:
        return FilterOp(op)
    except ValueError:
        return None


def _drop_at(items: tuple, index: int) -> Optional[tuple]:
    if index < 0 or index >= len(items):
        return None
    return items[:index] + items[index + 1:]


def remove_metric(state: BuilderState, index: int) -> BuilderState:
    remaining = _drop_at(state.metrics, index)
    if remaining is None:
        return state
    return state.model_copy(update={"metrics": remaining})


def stage_filter(
    state: BuilderState,
    field: Optional[str] = None,
    op: Optional[FilterOp] = None,
    value: Optional[str] = None,
) -> BuilderState:
    update = {}
    if field is not None:
        update["field"] = field
    if op is not None and _filter_op(op) is not None:
        update["op"] = _filter_op(op)
    if value is not None:
        update["value"] = value
    if not update:
        return state
    return state.model_copy(update={"draft": state.draft.model_copy(update=update)})


def add_filter(
    state: BuilderState,
    field: Optional[str] = None,
    op: Optional[FilterOp] = None,
    value: Optional[str] = None,
) -> BuilderState:
    """Append a filter; missing arguments fall back to the staged draft."""
    field = state.draft.field if field is None else field
    op = state.draft.op if op is None else _filter_op(op)
    value = state.draft.value if value is None else value
    if not field or not value or op is None:
        return state
    return state.model_copy(update={
        "filters": state.filters + (Filter(field=field, op=op, value=value),),
        "draft": FilterDraft(),
    })


def remove_filter(state: BuilderState, index: int) -> BuilderState:
    remaining = _drop_at(state.filters, index)
    if remaining is None:
        return state
    return state.model_copy(update={"filters": remaining})


def build_submittable(state: BuilderState) -> ReportConfig:
    metrics = state.metrics or (CountMetric(),)
    return ReportConfig(
        group_by=state.group_by,
        metrics=metrics,
        filters=state.filters,
        limit=REPORT_ROW_LIMIT,
    )
