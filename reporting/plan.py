from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import REPORT_ROW_LIMIT

MetricOp = Literal["count", "sum", "avg"]


class FilterOp(str, Enum):
    EQUALS = "eq"
    CONTAINS = "contains"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class WireModel(BaseModel):
    """Immutable value exchanged with the report service; camelCase on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


def _none_as_empty(value: Any) -> Any:
    # the service encodes empty slices as null
    return () if value is None else value


def _fit_rows(rows, info):
    width = len(info.data.get("columns", ()))
    return tuple(tuple(row[:width]) + ("",) * (width - len(row)) for row in rows)


class PreviewDataset(WireModel):
    dataset_id: str = Field(alias="reportId")
    file_name: str = Field(alias="fileName")
    byte_size: int = Field(default=0, ge=0, alias="size")
    columns: Tuple[str, ...] = ()
    sample_rows: Tuple[Tuple[str, ...], ...] = Field(default=(), alias="previewRows")

    @field_validator("columns", "sample_rows", mode="before")
    @classmethod
    def null_slices(cls, value):
        return _none_as_empty(value)

    @field_validator("sample_rows")
    @classmethod
    def pad_rows(cls, rows, info):
        return _fit_rows(rows, info)


class CountMetric(WireModel):
    op: Literal["count"] = "count"

    @property
    def label(self) -> str:
        return "count"


class SumMetric(WireModel):
    op: Literal["sum"] = "sum"
    field: str

    @property
    def label(self) -> str:
        return f"sum({self.field})"


class AverageMetric(WireModel):
    op: Literal["avg"] = "avg"
    field: str

    @property
    def label(self) -> str:
        return f"avg({self.field})"


Metric = Annotated[Union[CountMetric, SumMetric, AverageMetric], Field(discriminator="op")]

METRIC_TYPES: Dict[str, type] = {"count": CountMetric, "sum": SumMetric, "avg": AverageMetric}


def make_metric(op: str, field: Optional[str] = None):
    if op == "count":
        return CountMetric()
    return METRIC_TYPES[op](field=field)


class Filter(WireModel):
    field: str
    op: FilterOp = FilterOp.EQUALS
    value: str


class ReportConfig(WireModel):
    group_by: Tuple[str, ...] = Field(default=(), alias="groupBy")
    metrics: Tuple[Metric, ...] = ()
    filters: Tuple[Filter, ...] = ()
    limit: int = REPORT_ROW_LIMIT

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ReportResult(WireModel):
    columns: Tuple[str, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    rows_scanned: int = Field(default=0, ge=0, alias="rowsScanned")

    @field_validator("columns", "rows", mode="before")
    @classmethod
    def null_slices(cls, value):
        return _none_as_empty(value)

    @field_validator("rows")
    @classmethod
    def pad_rows(cls, rows, info):
        return _fit_rows(rows, info)


class SortState(WireModel):
    column_index: int
    direction: SortDirection = SortDirection.DESC


class SampleFile(WireModel):
    id: str
    file_name: str = Field(alias="fileName")
    title: str
    rows: int = 0
