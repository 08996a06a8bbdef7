"""
import_engine.xlsx_parser - Low-level workbook reading.

Responsibilities:
  • Open the workbook with openpyxl (values only, no formulas)
  • Read the first sheet only
  • Header row → verbatim column names (whitespace stripped)
  • Skip fully blank rows, default missing cells to ""
  • Tag each row with its sheet row number under ROW_NUMBER
"""

from __future__ import annotations

import io
import zipfile
from typing import Any, BinaryIO

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from import_engine.errors import WorkbookReadError

# Key holding the 1-based sheet row number of each returned row
ROW_NUMBER = "__row__"


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def read_rows(source: bytes | BinaryIO) -> list[dict[str, Any]]:
    """
    Return the first sheet as a list of {column name: raw cell value}.

    Raises WorkbookReadError if the content is not a readable workbook.
    """
    stream = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    try:
        workbook = load_workbook(stream, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise WorkbookReadError(f"Cannot open workbook: {exc}") from exc

    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        rows = enumerate(sheet.iter_rows(min_row=1, values_only=True), start=1)

        _, header = next(rows, (1, None))
        if header is None:
            return []
        columns = [str(h).strip() if not _blank(h) else "" for h in header]

        records: list[dict[str, Any]] = []
        for row_no, raw in rows:
            if raw is None or all(_blank(v) for v in raw):
                continue
            record: dict[str, Any] = {}
            for idx, name in enumerate(columns):
                if not name or name in record:
                    continue
                value = raw[idx] if idx < len(raw) else None
                record[name] = "" if value is None else value
            record[ROW_NUMBER] = row_no
            records.append(record)
        return records
    except (KeyError, ValueError, zipfile.BadZipFile) as exc:
        raise WorkbookReadError(f"Cannot read first sheet: {exc}") from exc
    finally:
        workbook.close()
