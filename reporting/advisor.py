from typing import Sequence

from pydantic import BaseModel

from .constants import GROUP_KEY_SEPARATOR, HIGH_CARDINALITY_RATIO
from .plan import PreviewDataset


class GroupingAdvice(BaseModel):
    group_count: int = 0
    sample_size: int = 0
    is_high_cardinality: bool = False


def estimate_grouping(preview: PreviewDataset, group_by: Sequence[str]) -> GroupingAdvice:
    """Count distinct group keys the selection produces over the preview sample.

    Advisory only: a high ratio means the grouping is close to one group per row.
    """
    sample_size = len(preview.sample_rows)
    idx_by_name = {name: i for i, name in enumerate(preview.columns)}
    indices = [idx_by_name[c] for c in group_by if c in idx_by_name]
    if not indices or sample_size == 0:
        return GroupingAdvice(sample_size=sample_size)

    keys = {GROUP_KEY_SEPARATOR.join(row[i] for i in indices) for row in preview.sample_rows}
    group_count = len(keys)
    return GroupingAdvice(
        group_count=group_count,
        sample_size=sample_size,
        is_high_cardinality=group_count / sample_size >= HIGH_CARDINALITY_RATIO,
    )
