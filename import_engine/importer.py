"""
import_engine.importer - Top-level orchestrator.

Coordinates xlsx_parser → row grouping → bulk upsert and produces
a structured ImportReport.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterable

from db.engine import get_session
from schema.entities import Project
from schema.numbering import synthesize_procedure_id
from services.projects_service import ProjectsService
from import_engine.errors import EmptyWorkbookError
from import_engine.report import ImportReport
from import_engine.row_processor import RowProcessor
from import_engine.xlsx_parser import ROW_NUMBER, read_rows

logger = logging.getLogger(__name__)


def parse_rows(rows: Iterable[dict]) -> tuple[list[Project], ImportReport]:
    """
    Group sheet rows into projects, one procedure per row.

    Rows sharing an ID land under one project in row order; the first
    row seen for an ID supplies the project-level fields.  Rows without
    an ID are skipped and reported by their sheet row number (ROW_NUMBER
    when the reader supplied it, else counted from 2).  Procedures still
    lacking an id afterwards get '{ID}-P{n}' from their final position.
    """
    report = ImportReport()
    processor = RowProcessor()
    projects: dict[str, Project] = {}

    for position, row in enumerate(rows, start=2):   # row 1 = header
        row_idx = row.get(ROW_NUMBER, position)
        report.total_rows += 1
        project_id = processor.project_id(row)
        if not project_id:
            report.skip(row_idx, "missing ID")
            continue

        procedure = processor.build_procedure(row)
        project = projects.get(project_id)
        if project is None:
            projects[project_id] = processor.build_project(project_id, row, procedure)
        else:
            project.procedures.append(procedure)

    for project in projects.values():
        for position, proc in enumerate(project.procedures, start=1):
            if not proc.id:
                proc.id = synthesize_procedure_id(project.id, position)

    result = list(projects.values())
    report.entities = result
    report.projects = len(result)
    report.procedures = sum(len(p.procedures) for p in result)
    return result, report


def parse_workbook(content: bytes | BinaryIO) -> list[Project]:
    """
    Read a workbook and return its projects.

    Raises WorkbookReadError / EmptyWorkbookError (both ImportFailure).
    """
    projects, _report = _parse(content)
    return projects


def _parse(content: bytes | BinaryIO) -> tuple[list[Project], ImportReport]:
    rows = read_rows(content)
    if not rows:
        raise EmptyWorkbookError("Workbook has no data rows")
    projects, report = parse_rows(rows)
    if not projects:
        raise EmptyWorkbookError(
            f"No row carries a project ID ({report.skipped} rows skipped)")
    return projects, report


def run_import(content: bytes | BinaryIO, *, persist: bool = True) -> ImportReport:
    """
    Import a workbook blob, optionally upserting every project.

    Parameters
    ----------
    content : raw .xlsx bytes (or a binary file object)
    persist : if True, bulk-upsert the projects in one transaction

    Returns
    -------
    ImportReport with per-row skip details.  Whole-file problems raise
    ImportFailure; database errors propagate after rollback.
    """
    projects, report = _parse(content)

    if persist:
        session = get_session()
        try:
            ProjectsService.save_bulk(session, projects)
            session.commit()
            report.persisted = True
        except Exception:
            session.rollback()
            logger.exception("Import rolled back")
            raise
        finally:
            session.close()

    logger.info(f"Imported {report.summary()}")
    return report
