from functools import lru_cache
from typing import List, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict

from .constants import HIGH_CARDINALITY_RATIO
from .numeric import parse_number
from .plan import PreviewDataset


class ColumnProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    index: int
    is_numeric: bool
    is_high_cardinality: bool
    distinct: int


def _column_values(preview: PreviewDataset, idx: int) -> List[str]:
    return [row[idx] for row in preview.sample_rows]


@lru_cache(maxsize=32)
def classify_columns(preview: PreviewDataset) -> Tuple[ColumnProfile, ...]:
    """Tag each preview column as numeric and/or high-cardinality from the sample rows.

    Both flags are sample heuristics; nothing here says anything about the full dataset.
    """
    n_rows = len(preview.sample_rows)
    profiles = []
    for idx, name in enumerate(preview.columns):
        values = _column_values(preview, idx)
        distinct = len(set(values))
        profiles.append(ColumnProfile(
            name=name,
            index=idx,
            is_numeric=any(parse_number(v) is not None for v in values),
            is_high_cardinality=n_rows > 0 and distinct / n_rows > HIGH_CARDINALITY_RATIO,
            distinct=distinct,
        ))
    return tuple(profiles)


def numeric_columns(preview: PreviewDataset) -> List[str]:
    return [p.name for p in classify_columns(preview) if p.is_numeric]


def high_cardinality_columns(preview: PreviewDataset) -> List[str]:
    return [p.name for p in classify_columns(preview) if p.is_high_cardinality]


def preview_dataframe(preview: PreviewDataset) -> pd.DataFrame:
    return pd.DataFrame(list(preview.sample_rows), columns=list(preview.columns))


def schema_dataframe(preview: PreviewDataset) -> pd.DataFrame:
    rows = []
    for p in classify_columns(preview):
        sample_vals = _column_values(preview, p.index)[:3]
        rows.append({
            "column": p.name,
            "numeric": p.is_numeric,
            "distinct": p.distinct,
            "mostly_unique": p.is_high_cardinality,
            "example_values": ", ".join(sample_vals),
        })
    return pd.DataFrame(rows, columns=["column", "numeric", "distinct", "mostly_unique", "example_values"])


def format_bytes(size: int, decimals: int = 2) -> str:
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    value = float(size)
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"
