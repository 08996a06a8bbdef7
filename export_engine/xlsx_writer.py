"""
export_engine.xlsx_writer - Serialise flat rows to a one-sheet workbook.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

from openpyxl import Workbook
from openpyxl.utils.exceptions import IllegalCharacterError

from export_engine.flatten import EXPORT_COLUMNS, flatten_procedures
from schema.entities import Project

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "Portefeuille_Procedures_Afpa.xlsx"
SHEET_NAME = "Procédures Afpa"


class ExportError(Exception):
    """The workbook could not be written."""


def write_workbook(rows: Iterable[dict], target: str | Path | BinaryIO) -> None:
    """
    Write *rows* under a fixed header row to *target* (path or binary file).

    Every string is stored as text, including ones starting with '='.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME
    try:
        _append_text_row(ws, EXPORT_COLUMNS)
        for row in rows:
            _append_text_row(ws, [row.get(col, "") for col in EXPORT_COLUMNS])
        wb.save(target)
    except (IllegalCharacterError, OSError, ValueError, TypeError) as exc:
        raise ExportError(f"Cannot write workbook: {exc}") from exc


def _append_text_row(ws, values) -> None:
    ws.append(list(values))
    for cell in ws[ws.max_row]:
        if isinstance(cell.value, str):
            cell.data_type = "s"


def workbook_bytes(rows: Iterable[dict]) -> bytes:
    buf = io.BytesIO()
    write_workbook(rows, buf)
    return buf.getvalue()


def export_procedures(
    projects: Iterable[Project],
    file_name: Optional[str] = None,
    directory: str | Path = ".",
) -> Path:
    """
    Flatten *projects* and write the procedures report.

    Written to a ".part" sibling and renamed once complete.
    """
    rows = flatten_procedures(projects)
    target = Path(directory) / (file_name or DEFAULT_FILE_NAME)
    partial = target.with_name(target.name + ".part")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExportError(f"Cannot create {target.parent}: {exc}") from exc

    try:
        write_workbook(rows, partial)
        partial.replace(target)
    except OSError as exc:
        partial.unlink(missing_ok=True)
        raise ExportError(f"Cannot write {target}: {exc}") from exc
    except ExportError:
        partial.unlink(missing_ok=True)
        raise
    logger.info(f"Exported {len(rows)} procedures to {target}")
    return target
