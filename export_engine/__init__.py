"""
export_engine - Procedure portfolio export.

Public API:
    flatten_procedures(projects)                      → list[dict]
    export_procedures(projects, file_name, directory) → Path
    workbook_bytes(rows)                              → bytes
"""

from export_engine.flatten import EXPORT_COLUMNS, flatten_procedures   # noqa: F401
from export_engine.xlsx_writer import (                                # noqa: F401
    DEFAULT_FILE_NAME,
    SHEET_NAME,
    ExportError,
    export_procedures,
    workbook_bytes,
    write_workbook,
)
