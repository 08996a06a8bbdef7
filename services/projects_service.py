"""
services.projects_service - Persistence of Project documents.

All session management is the caller's responsibility (open before,
close/commit after).  This keeps the service testable and allows
the caller to batch multiple operations in one transaction.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import delete
from sqlalchemy.orm import Session

from db.models import ProjectRecord
from schema.entities import Procedure, Project
from schema.loader import trigram_for
from schema.numbering import (
    build_procedure_number, next_procedure_prefix, synthesize_procedure_id,
)

logger = logging.getLogger(__name__)


class ProjectsService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get_all(session: Session) -> list[Project]:
        """Every stored project, most recently updated first."""
        records = (session.query(ProjectRecord)
                   .order_by(ProjectRecord.updated_at.desc())
                   .all())
        projects = []
        for rec in records:
            doc = rec.to_dict()
            if doc.get("ID"):
                projects.append(Project.from_dict(doc))
        return projects

    @staticmethod
    def get(session: Session, project_id: str) -> Project | None:
        rec = session.get(ProjectRecord, str(project_id).strip())
        if rec is None:
            return None
        return Project.from_dict(rec.to_dict())

    # ── Write ──────────────────────────────────────────────────────────

    @staticmethod
    def save(session: Session, project: Project) -> str:
        """Upsert one project keyed by its ID.  Returns the ID."""
        if not project.id:
            raise ValueError("Missing project ID")
        ProjectsService._upsert(session, project)
        session.flush()
        return project.id

    @staticmethod
    def save_bulk(session: Session, projects: Iterable[Project]) -> int:
        """Upsert many projects; entries without ID are ignored."""
        count = 0
        for project in projects:
            if project is None or not project.id:
                continue
            ProjectsService._upsert(session, project)
            count += 1
        if count:
            session.flush()
        logger.debug(f"Bulk upsert of {count} projects")
        return count

    @staticmethod
    def delete(session: Session, project_id: str) -> bool:
        rec = session.get(ProjectRecord, str(project_id).strip())
        if rec is None:
            return False
        session.delete(rec)
        session.flush()
        return True

    @staticmethod
    def clear(session: Session) -> int:
        result = session.execute(delete(ProjectRecord))
        session.flush()
        return result.rowcount or 0

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _upsert(session: Session, project: Project) -> None:
        rec = session.get(ProjectRecord, project.id)
        if rec is None:
            rec = ProjectRecord(id=project.id)
            session.add(rec)
        rec.set_document(project.to_dict())


def add_procedure(project: Project, all_projects: Iterable[Project]) -> Procedure:
    """
    Append a blank procedure to *project* (the form's "create" action).

    The id follows the import fallback scheme, the buyer is inherited
    from the project and the display number takes the next free prefix
    across *all_projects* and *project* itself.
    """
    others = [p for p in all_projects if p.id != project.id]
    prefix = next_procedure_prefix([*others, project])
    proc = Procedure(
        id=synthesize_procedure_id(project.id, len(project.procedures) + 1),
        acheteur=project.acheteur,
        numero_afpa=build_procedure_number(prefix, "", trigram_for(project.acheteur)),
    )
    project.procedures.append(proc)
    return proc


def regenerate_procedure_number(project: Project, procedure: Procedure,
                                all_projects: Iterable[Project]) -> str:
    """Recompute the display number from subject and buyer."""
    others = [p for p in all_projects if p.id != project.id]
    prefix = next_procedure_prefix([*others, project])
    buyer = procedure.acheteur or project.acheteur
    procedure.numero_afpa = build_procedure_number(
        prefix, procedure.objet_court, trigram_for(buyer))
    return procedure.numero_afpa
