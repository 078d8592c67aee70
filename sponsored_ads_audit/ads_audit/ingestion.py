"""Bulk export sheet reading and analysis workbook writing.

Reads go through polars first and fall back to openpyxl when polars has no usable
Excel engine or rejects the sheet; writes follow the same order.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, Sequence

import polars as pl

SHEET_TITLE_LIMIT = 31


def _openpyxl() -> tuple[Any, Any]:
    try:
        from openpyxl import Workbook, load_workbook
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("openpyxl is required to read and write bulk export workbooks.") from exc
    return Workbook, load_workbook


def _header_names(raw_headers: Sequence[Any]) -> list[str]:
    """Blank headers become column_N; repeats get a numeric suffix (Spend, Spend_2)."""
    names: list[str] = []
    occurrences: dict[str, int] = {}
    for position, raw in enumerate(raw_headers, start=1):
        base = f"column_{position}" if raw in (None, "") else str(raw).strip()
        occurrences[base] = occurrences.get(base, 0) + 1
        names.append(base if occurrences[base] == 1 else f"{base}_{occurrences[base]}")
    return names


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, float) and math.isnan(value))


def _record_value(value: Any) -> Any:
    return "" if _is_blank(value) else value


def _records(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {str(column): _record_value(value) for column, value in row.items()}
        for row in rows
        if not all(_is_blank(value) for value in row.values())
    ]


def list_sheet_names(path: Path) -> list[str]:
    _, load_workbook = _openpyxl()
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        return list(workbook.sheetnames)
    finally:
        workbook.close()


def _polars_sheet(path: Path, sheet_name: str) -> pl.DataFrame:
    """Every column is read as text so "$1,234.56" and "12%" reach the normalizer intact."""
    if not hasattr(pl, "read_excel"):
        raise RuntimeError("polars.read_excel is not available in this environment.")
    try:
        frame = pl.read_excel(path, sheet_name=sheet_name, infer_schema_length=0)  # type: ignore[arg-type]
    except TypeError:
        frame = pl.read_excel(path, sheet_name=sheet_name)  # type: ignore[arg-type]
    if isinstance(frame, dict):
        frame = frame.get(sheet_name, pl.DataFrame())
    return frame


def _openpyxl_sheet(path: Path, sheet_name: str) -> list[dict[str, Any]]:
    _, load_workbook = _openpyxl()
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        if sheet_name not in workbook.sheetnames:
            raise KeyError(sheet_name)
        values = workbook[sheet_name].iter_rows(values_only=True)
        header = next(values, None)
        if header is None:
            return []
        columns = _header_names(header)
        return _records(
            {column: (row[position] if position < len(row) else None) for position, column in enumerate(columns)}
            for row in values
            if row is not None
        )
    finally:
        workbook.close()


def read_sheet_rows(path: str | Path, sheet_name: str) -> list[dict[str, Any]]:
    """Return one sheet as ordered header -> value records, blanks as ""."""
    excel_path = Path(path)
    if not excel_path.exists():
        raise FileNotFoundError(f"Input Excel file not found: {excel_path}")
    try:
        return _records(_polars_sheet(excel_path, sheet_name).iter_rows(named=True))
    except Exception:
        return _openpyxl_sheet(excel_path, sheet_name)


def _cell(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _sheet_title(name: str) -> str:
    return str(name)[:SHEET_TITLE_LIMIT]


def _write_with_polars(path: Path, sheets: Dict[str, pl.DataFrame]) -> bool:
    if not sheets or not all(hasattr(frame, "write_excel") for frame in sheets.values()):
        return False
    try:
        import xlsxwriter  # type: ignore[import-not-found]
    except ImportError:
        return False
    try:
        with xlsxwriter.Workbook(str(path)) as workbook:
            for name, frame in sheets.items():
                frame.write_excel(workbook=workbook, worksheet=_sheet_title(name))
    except Exception:
        return False
    return True


def _write_with_openpyxl(path: Path, sheets: Dict[str, pl.DataFrame]) -> None:
    Workbook, _ = _openpyxl()
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, frame in sheets.items():
        worksheet = workbook.create_sheet(title=_sheet_title(name))
        worksheet.append(list(frame.columns))
        for row in frame.rows():
            worksheet.append([_cell(value) for value in row])
    workbook.save(path)


def write_output_excel(path: str | Path, sheets: Dict[str, pl.DataFrame]) -> None:
    """Write one worksheet per frame; polars/xlsxwriter first, openpyxl otherwise."""
    excel_path = Path(path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)
    if not _write_with_polars(excel_path, sheets):
        _write_with_openpyxl(excel_path, sheets)
