from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from .constants import MEASURE_LABELS, MEASURE_PREFIXES
from .numeric import parse_number
from .plan import ReportResult, SortDirection, SortState

Row = Sequence[str]

# Default metric/sort column, first matching rule wins.
DEFAULT_COLUMN_RULES: List[Callable[[str], bool]] = [
    lambda label: label.startswith("avg("),
    lambda label: label.startswith("sum("),
    lambda label: label == "count",
]


class ResultView(BaseModel):
    is_empty: bool
    measure_indices: List[int] = []
    dimension_indices: List[int] = []
    metric_index: Optional[int] = None
    sort: Optional[SortState] = None


def is_measure(label: str) -> bool:
    return label in MEASURE_LABELS or label.startswith(MEASURE_PREFIXES)


def measure_indices(columns: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(columns) if is_measure(c)]


def dimension_indices(columns: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(columns) if not is_measure(c)]


def default_measure_index(columns: Sequence[str]) -> Optional[int]:
    for rule in DEFAULT_COLUMN_RULES:
        for i, label in enumerate(columns):
            if rule(label):
                return i
    measures = measure_indices(columns)
    return measures[0] if measures else None


def default_sort(columns: Sequence[str]) -> Optional[SortState]:
    idx = default_measure_index(columns)
    if idx is None:
        return None
    return SortState(column_index=idx, direction=SortDirection.DESC)


def interpret_result(result: ReportResult) -> ResultView:
    """Classify result columns and pick the initial chart metric and table sort.

    Called once per new result; sort state is never carried over between runs.
    """
    if not result.rows:
        return ResultView(is_empty=True)
    return ResultView(
        is_empty=False,
        measure_indices=measure_indices(result.columns),
        dimension_indices=dimension_indices(result.columns),
        metric_index=default_measure_index(result.columns),
        sort=default_sort(result.columns),
    )


def toggle_sort(current: Optional[SortState], column_index: int) -> SortState:
    if current is not None and current.column_index == column_index:
        flipped = SortDirection.ASC if current.direction == SortDirection.DESC else SortDirection.DESC
        return SortState(column_index=column_index, direction=flipped)
    return SortState(column_index=column_index, direction=SortDirection.DESC)


def compare_cells(a: str, b: str) -> int:
    a_num, b_num = parse_number(a), parse_number(b)
    if a_num is not None and b_num is not None:
        return (a_num > b_num) - (a_num < b_num)
    return (a > b) - (a < b)


def _cell(row: Row, idx: int) -> str:
    return row[idx] if idx < len(row) else ""


def sort_rows(rows: Sequence[Row], sort: Optional[SortState]) -> List[Tuple[str, ...]]:
    """Stable, numeric-aware sort. Returns a new list; ``rows`` is left untouched."""
    out = [tuple(r) for r in rows]
    if sort is None:
        return out
    idx = sort.column_index
    sign = 1 if sort.direction == SortDirection.ASC else -1
    return sorted(out, key=cmp_to_key(lambda a, b: sign * compare_cells(_cell(a, idx), _cell(b, idx))))


def summary_text(result: ReportResult) -> str:
    return f"{len(result.rows)} groups • {result.rows_scanned:,} rows scanned"
