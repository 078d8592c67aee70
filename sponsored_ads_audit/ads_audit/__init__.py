"""Sponsored ads bulk report analysis package."""

from .application import AnalysisResult, analyze, build_aggregates, evaluate, reanalyze
from .errors import AnalysisError, EmptyInputError, RecordSourceError
from .infrastructure import BulkWorkbook, JsonAnalysisStore, load_bulk_rows

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "BulkWorkbook",
    "EmptyInputError",
    "JsonAnalysisStore",
    "RecordSourceError",
    "analyze",
    "build_aggregates",
    "evaluate",
    "load_bulk_rows",
    "reanalyze",
]
