"""Application layer package."""

from .analysis_service import AnalysisResult, analyze, build_aggregates, evaluate, reanalyze
from .deduplication import classify, deduplicate

__all__ = ["AnalysisResult", "analyze", "build_aggregates", "classify", "deduplicate", "evaluate", "reanalyze"]
