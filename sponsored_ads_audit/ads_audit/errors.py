"""Error taxonomy for the analysis core and its collaborators."""

from __future__ import annotations


class AnalysisError(ValueError):
    """Base class for failures that abort an analysis run."""


class EmptyInputError(AnalysisError):
    """No advertising rows survived the activity filter and deduplication."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                "No valid advertising data found in the file. "
                "Please check that your file contains columns for Spend, Clicks, Impressions, and Sales."
            )
        )


class RecordSourceError(AnalysisError):
    """The workbook could not be read or holds no usable sheet."""


class AnalysisNotFoundError(LookupError):
    def __init__(self, owner_id: str, analysis_id: str) -> None:
        super().__init__(f"Analysis '{analysis_id}' not found for owner '{owner_id}'.")
        self.owner_id = owner_id
        self.analysis_id = analysis_id
