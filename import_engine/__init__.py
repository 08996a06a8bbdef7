"""
import_engine - Workbook import pipeline.

Public API:
    run_import(file_content, persist=True) → ImportReport
    parse_workbook(file_content)           → list[Project]
    parse_rows(rows)                       → (list[Project], ImportReport)
"""

from import_engine.errors import (                           # noqa: F401
    ImportFailure, WorkbookReadError, EmptyWorkbookError,
)
from import_engine.importer import run_import, parse_workbook, parse_rows   # noqa: F401
from import_engine.normalize import normalize_date           # noqa: F401
from import_engine.report import ImportReport                # noqa: F401
