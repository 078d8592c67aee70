"""Infrastructure layer package."""

from .analysis_store import JsonAnalysisStore, SavedAnalysis
from .excel_repository import BulkWorkbook, load_bulk_rows, select_sheet
from .report_exporter import save_analysis_workbook, save_summary_json

__all__ = [
    "BulkWorkbook",
    "JsonAnalysisStore",
    "SavedAnalysis",
    "load_bulk_rows",
    "save_analysis_workbook",
    "save_summary_json",
    "select_sheet",
]
