"""Tests for chart figure construction."""

from reporting.chart import reduce_chart
from reporting.plan import ReportResult
from reporting.viz import build_figure, result_dataframe


def _result_with_group_named_other():
    """11 groups, a real group called "Other", and two tail rows that fold into the bucket."""
    rows = [[f"g{i:02d}", f"{100 - i}"] for i in range(11)]
    rows += [["Other", "50"], ["t1", "2"], ["t2", "1"]]
    return ReportResult(columns=["customer", "sum(total)"], rows=rows, rowsScanned=14)


class TestBuildFigure:
    def test_same_label_points_stay_separate_bars(self):
        series = reduce_chart(_result_with_group_named_other(), 1)
        assert [p.name for p in series.points].count("Other") == 2

        fig = build_figure(series)

        assert len(set(fig.data[0].x)) == 13
        assert list(fig.data[0].y) == [p.value for p in series.points]
        assert list(fig.layout.xaxis.ticktext) == [p.name for p in series.points]

    def test_horizontal_layout_uses_positions(self):
        rows = [["A very long customer name", "5"], ["Other long customer name", "3"]]
        series = reduce_chart(ReportResult(columns=["customer", "count"], rows=rows, rowsScanned=8), 1)
        assert series.horizontal

        fig = build_figure(series)

        assert list(fig.data[0].y) == [0, 1]
        assert fig.data[0].orientation == "h"
        assert list(fig.layout.yaxis.ticktext) == ["A very long customer...", "Other long customer ..."]


def test_result_dataframe_handles_service_rows_of_wrong_width():
    result = ReportResult(columns=["name", "count"], rows=[["a", "1", "x"], ["b"]], rowsScanned=2)

    df = result_dataframe(result.columns, result.rows)

    assert df.values.tolist() == [["a", "1"], ["b", ""]]
