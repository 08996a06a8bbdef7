"""
import_engine.row_processor - Turn one sheet row into records.

Single-responsibility: given a dict-row, read the project key and
build the Procedure / Project it describes.  Never raises on bad
cell content; unusable values become "".
"""

from __future__ import annotations

from typing import Any

from schema.entities import Procedure, Project, split_list
from schema.fields import (
    PROJECT_FIELDS, PROCEDURE_FIELDS, SUB_FAMILIES,
    PROJECT_DATE_COLUMNS, PROCEDURE_DATE_COLUMNS,
)
from import_engine.field_map import (
    SOURCE_PROJECT_ID, SOURCE_PROCEDURE_ID, PROJECT_SOURCES, PROCEDURE_SOURCES,
)
from import_engine.normalize import cell_text, normalize_date


class RowProcessor:

    # ── Keys ───────────────────────────────────────────────────────────

    @staticmethod
    def project_id(row: dict) -> str:
        """Trimmed project ID, '' when the row cannot be attached."""
        return cell_text(row.get(SOURCE_PROJECT_ID))

    # ── Records ────────────────────────────────────────────────────────

    def build_procedure(self, row: dict) -> Procedure:
        proc = Procedure(id=cell_text(row.get(SOURCE_PROCEDURE_ID)))
        for col, attr in PROCEDURE_FIELDS.items():
            setattr(proc, attr, self._read(
                row, PROCEDURE_SOURCES[col], col in PROCEDURE_DATE_COLUMNS))
        proc.sous_familles = split_list(cell_text(row.get(SUB_FAMILIES)))
        return proc

    def build_project(self, project_id: str, row: dict, first: Procedure) -> Project:
        project = Project(id=project_id, procedures=[first])
        for col, attr in PROJECT_FIELDS.items():
            setattr(project, attr, self._read(
                row, PROJECT_SOURCES[col], col in PROJECT_DATE_COLUMNS))
        return project

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _read(row: dict, sources: tuple[str, ...], is_date: bool) -> str:
        for src in sources:
            raw: Any = row.get(src)
            val = normalize_date(raw) if is_date else cell_text(raw)
            if val:
                return val
        return ""
