"""Infrastructure adapter exposing a bulk export workbook as sheet record sets."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from ads_audit.errors import RecordSourceError
from ads_audit.ingestion import list_sheet_names, read_sheet_rows

logger = logging.getLogger(__name__)

PREFERRED_SHEET_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"sponsored.*products.*campaigns", re.IGNORECASE),
    re.compile(r"sponsored.*products", re.IGNORECASE),
    re.compile(r"campaigns", re.IGNORECASE),
    re.compile(r"search.*terms", re.IGNORECASE),
    re.compile(r"keywords", re.IGNORECASE),
    re.compile(r"targeting", re.IGNORECASE),
)
SKIP_SHEET_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"portfolio", re.IGNORECASE),
    re.compile(r"summary", re.IGNORECASE),
    re.compile(r"overview", re.IGNORECASE),
)


class BulkWorkbook:
    """Record source over one .xlsx bulk export; sheets are read lazily and cached."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise RecordSourceError(f"Input Excel file not found: {self.path}")
        self._rows: dict[str, list[dict[str, Any]]] = {}

    def list_sheets(self) -> list[str]:
        try:
            names = list_sheet_names(self.path)
        except Exception as exc:
            raise RecordSourceError(f"Could not read workbook {self.path}: {exc}") from exc
        if not names:
            raise RecordSourceError("The file appears to be empty or corrupted.")
        return names

    def read_sheet(self, name: str) -> list[dict[str, Any]]:
        if name not in self._rows:
            if name not in self.list_sheets():
                raise RecordSourceError(f"Sheet '{name}' not found in {self.path.name}")
            self._rows[name] = read_sheet_rows(self.path, name)
        return self._rows[name]


def select_sheet(workbook: BulkWorkbook) -> str:
    """Pick the campaign/keyword sheet of a bulk export."""
    names = workbook.list_sheets()
    for pattern in PREFERRED_SHEET_PATTERNS:
        for name in names:
            if pattern.search(name) and workbook.read_sheet(name):
                logger.info("using preferred sheet %s", name)
                return name

    for name in names:
        if any(pattern.search(name) for pattern in SKIP_SHEET_PATTERNS):
            logger.info("skipping sheet %s", name)
            continue
        if workbook.read_sheet(name):
            logger.info("using sheet %s", name)
            return name

    raise RecordSourceError(
        "No data found in the uploaded file. Please make sure your Excel file contains data and try again."
    )


def load_bulk_rows(path: str | Path, sheet: str | None = None) -> tuple[str, list[dict[str, Any]]]:
    workbook = BulkWorkbook(path)
    sheet_name = sheet or select_sheet(workbook)
    rows = workbook.read_sheet(sheet_name)
    logger.info("loaded %d rows from sheet %s", len(rows), sheet_name)
    return sheet_name, rows
