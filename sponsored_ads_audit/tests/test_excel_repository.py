import pytest
from openpyxl import Workbook

from ads_audit.domain.columns import to_number, to_text
from ads_audit.errors import RecordSourceError
from ads_audit.infrastructure.excel_repository import BulkWorkbook, load_bulk_rows, select_sheet

HEADER = ["Entity", "Campaign ID", "Campaign Name", "Keyword Text", "Spend", "Clicks", "Sales"]


def _write_workbook(path, sheets):
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        worksheet = workbook.create_sheet(title=name)
        for row in rows:
            worksheet.append(row)
    workbook.save(path)
    return path


def test_preferred_sheet_wins_over_sheet_order(tmp_path):
    path = _write_workbook(
        tmp_path / "bulk.xlsx",
        {
            "Portfolios": [["Portfolio Name", "Budget"], ["Main", 100]],
            "Sponsored Brands Campaigns": [HEADER, ["Keyword", "B1", "Brand", "hat", 3, 1, 0]],
            "Sponsored Products Campaigns": [HEADER, ["Keyword", "P1", "Shoes", "trail shoes", "12.50", 4, 30]],
        },
    )

    sheet_name, rows = load_bulk_rows(path)

    assert sheet_name == "Sponsored Products Campaigns"
    assert len(rows) == 1
    assert list(rows[0])[: len(HEADER)] == HEADER
    assert to_text(rows[0]["Keyword Text"]) == "trail shoes"
    assert to_number(rows[0]["Spend"]) == 12.5
    assert to_number(rows[0]["Clicks"]) == 4


def test_summary_like_sheets_are_skipped(tmp_path):
    path = _write_workbook(
        tmp_path / "report.xlsx",
        {
            "Account Summary": [["Metric", "Value"], ["Spend", 10]],
            "Portfolio Overview": [["Metric", "Value"], ["Spend", 10]],
            "Export": [HEADER, ["Keyword", "C1", "Camp", "boots", 5, 2, 0]],
        },
    )

    assert select_sheet(BulkWorkbook(path)) == "Export"


def test_preferred_sheet_without_rows_falls_through(tmp_path):
    path = _write_workbook(
        tmp_path / "bulk.xlsx",
        {
            "Sponsored Products Campaigns": [HEADER],
            "Data": [HEADER, ["Keyword", "C1", "Camp", "boots", 5, 2, 0]],
        },
    )

    assert select_sheet(BulkWorkbook(path)) == "Data"


def test_workbook_without_data_raises(tmp_path):
    path = _write_workbook(tmp_path / "empty.xlsx", {"Sheet1": [HEADER], "Summary": [["Metric"], ["Spend"]]})

    with pytest.raises(RecordSourceError, match="No data found"):
        load_bulk_rows(path)


def test_explicit_sheet_is_used_and_validated(tmp_path):
    path = _write_workbook(
        tmp_path / "bulk.xlsx",
        {"Campaigns": [HEADER, ["Keyword", "C1", "Camp", "boots", 5, 2, 0]], "Other": [HEADER]},
    )

    assert load_bulk_rows(path, sheet="Other") == ("Other", [])
    with pytest.raises(RecordSourceError, match="not found"):
        load_bulk_rows(path, sheet="Missing")


def test_missing_file_raises(tmp_path):
    with pytest.raises(RecordSourceError, match="not found"):
        BulkWorkbook(tmp_path / "nope.xlsx")


def test_blank_rows_are_skipped(tmp_path):
    path = _write_workbook(
        tmp_path / "bulk.xlsx",
        {
            "Campaigns": [
                HEADER,
                ["Keyword", "C1", "Camp", "boots", 5, 2, 0],
                [None, None, None, None, None, None, None],
                ["Keyword", "C1", "Camp", "socks", 1, 1, None],
            ]
        },
    )

    _, rows = load_bulk_rows(path)

    assert [to_text(row["Keyword Text"]) for row in rows] == ["boots", "socks"]
    assert rows[1]["Sales"] == ""
