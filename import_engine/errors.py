"""
import_engine.errors - Failures that reject a whole import.

Row-level problems never raise; they are recorded on the ImportReport.
"""


class ImportFailure(Exception):
    """Base class: the uploaded workbook cannot be turned into projects."""

    user_message = "file empty or malformed"


class WorkbookReadError(ImportFailure):
    """The file is not a readable workbook (corrupt, wrong format …)."""


class EmptyWorkbookError(ImportFailure):
    """The workbook was read but produced no usable rows / projects."""
