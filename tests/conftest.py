"""Shared pytest fixtures for all tests."""

import pytest

from reporting.plan import PreviewDataset, ReportResult


@pytest.fixture
def invoices_preview() -> PreviewDataset:
    """Small invoice export: id is unique, customer repeats, total is numeric."""
    return PreviewDataset(
        reportId="sample-invoices",
        fileName="sample-invoices.csv",
        size=2048,
        columns=["id", "customer", "region", "total"],
        previewRows=[
            ["1", "Acme", "North", "100"],
            ["2", "Acme", "North", "250.5"],
            ["3", "Globex", "South", "75"],
            ["4", "Initech", "South", ""],
            ["5", "Globex", "North", "n/a"],
        ],
    )


@pytest.fixture
def single_row_preview() -> PreviewDataset:
    return PreviewDataset(
        reportId="sample-1",
        fileName="sample-invoices.csv",
        size=1024,
        columns=["id", "name", "total"],
        previewRows=[["1", "Test", "100"]],
    )


@pytest.fixture
def simple_result() -> ReportResult:
    return ReportResult(
        columns=["name", "count", "sum(total)"],
        rows=[["Test", "1", "100.00"]],
        rowsScanned=1,
    )


def make_grouped_result(n: int) -> ReportResult:
    """n groups named g01..gNN with sum(total) == group number."""
    return ReportResult(
        columns=["customer", "count", "sum(total)"],
        rows=[[f"g{i:02d}", "1", f"{i}.00"] for i in range(1, n + 1)],
        rowsScanned=n,
    )
