"""Tests for chart series reduction."""

import pytest

from reporting.chart import (
    ChartPoint,
    ChartSeries,
    NotChartable,
    axis_label,
    format_compact,
    is_chartable,
    reduce_chart,
    tooltip_label,
)
from reporting.numeric import coerce_number
from reporting.plan import ReportResult

from .conftest import make_grouped_result


class TestEligibility:
    def test_single_column_is_not_chartable(self):
        result = ReportResult(columns=["count"], rows=[["5"]], rowsScanned=5)

        assert is_chartable(result) is False
        assert isinstance(reduce_chart(result, 0), NotChartable)

    def test_no_measure_is_not_chartable(self):
        result = ReportResult(columns=["a", "b"], rows=[["x", "y"]], rowsScanned=1)

        assert isinstance(reduce_chart(result, 1), NotChartable)

    def test_metric_index_out_of_range(self, simple_result):
        assert isinstance(reduce_chart(simple_result, -1), NotChartable)
        assert isinstance(reduce_chart(simple_result, 7), NotChartable)


class TestReduceChart:
    def test_scenario(self, simple_result):
        series = reduce_chart(simple_result, 2, [0])

        assert series == ChartSeries(
            points=[ChartPoint(name="Test", value=100.0)],
            horizontal=False,
            metric_label="sum(total)",
        )

    def test_top_twelve_and_other(self):
        result = make_grouped_result(15)

        series = reduce_chart(result, 2)

        assert len(series.points) == 13
        assert [p.name for p in series.points[:3]] == ["g15", "g14", "g13"]
        assert series.points[11].name == "g04"
        assert series.points[-1] == ChartPoint(name="Other", value=1.0 + 2.0 + 3.0)

    def test_exactly_twelve_rows_has_no_other(self):
        series = reduce_chart(make_grouped_result(12), 2)

        assert len(series.points) == 12
        assert all(p.name != "Other" for p in series.points)

    def test_other_sums_everything_beyond_top(self):
        result = make_grouped_result(40)

        series = reduce_chart(result, 2)
        ranked = sorted(result.rows, key=lambda r: coerce_number(r[2]), reverse=True)

        assert len(series.points) <= 13
        assert series.points[-1].value == sum(coerce_number(r[2]) for r in ranked[12:])

    def test_unparseable_values_count_as_zero(self):
        result = ReportResult(
            columns=["name", "sum(total)"],
            rows=[["a", "oops"], ["b", "3"], ["c", ""]],
            rowsScanned=3,
        )

        series = reduce_chart(result, 1)

        assert [(p.name, p.value) for p in series.points] == [("b", 3.0), ("a", 0.0), ("c", 0.0)]

    def test_unparseable_tail_values_add_nothing_to_other(self):
        rows = [[f"g{i:02d}", f"{100 - i}"] for i in range(12)] + [["t1", "4"], ["t2", "n/a"], ["t3", ""]]
        result = ReportResult(columns=["customer", "sum(total)"], rows=rows, rowsScanned=15)

        series = reduce_chart(result, 1)

        assert len(series.points) == 13
        assert series.points[-1] == ChartPoint(name="Other", value=4.0)

    def test_multiple_dimensions_joined(self):
        result = ReportResult(
            columns=["region", "customer", "count"],
            rows=[["North", "Acme", "2"]],
            rowsScanned=2,
        )

        series = reduce_chart(result, 2)

        assert series.points[0].name == "North / Acme"

    def test_total_label_without_dimensions(self):
        result = ReportResult(columns=["count", "sum(total)"], rows=[["3", "42"]], rowsScanned=3)

        series = reduce_chart(result, 1)

        assert series.points == [ChartPoint(name="Total", value=42.0)]

    def test_empty_dimension_value_becomes_total(self):
        result = ReportResult(columns=["customer", "count"], rows=[["", "4"]], rowsScanned=4)

        assert reduce_chart(result, 1).points[0].name == "Total"

    def test_long_label_switches_to_horizontal(self):
        result = ReportResult(
            columns=["customer", "count"],
            rows=[["Short", "1"], ["Fifteen chars!!", "2"]],
            rowsScanned=3,
        )

        assert reduce_chart(result, 1).horizontal is True

    def test_fourteen_chars_stays_vertical(self):
        result = ReportResult(columns=["customer", "count"], rows=[["Fourteen chars", "1"]], rowsScanned=1)

        assert reduce_chart(result, 1).horizontal is False

    def test_source_rows_untouched(self):
        result = make_grouped_result(20)
        before = result.rows

        reduce_chart(result, 2)

        assert result.rows == before


class TestLabels:
    def test_axis_truncation(self):
        assert axis_label("x" * 20) == "x" * 20
        assert axis_label("x" * 21) == "x" * 20 + "..."

    def test_tooltip_truncation(self):
        assert tooltip_label("y" * 30) == "y" * 30
        assert tooltip_label("y" * 31) == "y" * 30 + "..."

    @pytest.mark.parametrize("value,expected", [
        (0.0, "0"),
        (42.0, "42"),
        (2.5, "2.5"),
        (1000.0, "1.0k"),
        (12345.0, "12.3k"),
    ])
    def test_format_compact(self, value, expected):
        assert format_compact(value) == expected
