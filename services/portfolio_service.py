"""
services.portfolio_service - Filtering, sorting and figures over projects.

Pure functions over Project records; no session needed.  Used by the
project / procedure listings and the dashboard statistics endpoint.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from schema.entities import Procedure, Project
from services.amounts import parse_amount

NOT_DEFINED = "Non défini"
NOT_ASSIGNED = "Non assigné"


@dataclass
class ProcedureRow:
    """A procedure seen from the portfolio: with its parent's identity."""

    procedure: Procedure
    project_id: str
    project_title: str
    project_buyer: str

    def to_dict(self) -> dict:
        return {
            "procedure": self.procedure.to_dict(),
            "projectId": self.project_id,
            "projectTitle": self.project_title,
            "projectBuyer": self.project_buyer,
        }


def natural_key(value: str) -> list:
    """'P10' sorts after 'P9'."""
    return [(0, int(tok), "") if tok.isdigit() else (1, 0, tok.lower())
            for tok in re.split(r"(\d+)", str(value)) if tok]


def unique_values(values: Iterable[str]) -> list[str]:
    return sorted({v for v in values if v})


# ── Projects ──────────────────────────────────────────────────────────

def filter_projects(
    projects: Iterable[Project],
    q: str = "",
    statuses: Optional[Iterable[str]] = None,
    buyer: str = "",
) -> list[Project]:
    """Text search on title / ID, status whitelist, exact buyer; ID desc."""
    needle = (q or "").strip().lower()
    wanted = set(statuses or [])
    out = []
    for p in projects:
        if needle and needle not in p.titre_du_dossier.lower() and needle not in p.id.lower():
            continue
        if wanted and p.statut_du_dossier not in wanted:
            continue
        if buyer and p.acheteur != buyer:
            continue
        out.append(p)
    return sorted(out, key=lambda p: natural_key(p.id), reverse=True)


def project_totals(project: Project) -> dict:
    """TTC envelope vs. sum of procedure HT amounts."""
    ttc = parse_amount(project.montant_ttc)
    procedures_ht = sum(parse_amount(proc.montant_ht) for proc in project.procedures)
    return {
        "ttc": ttc,
        "procedures_ht": procedures_ht,
        "budget_issue": ttc < procedures_ht,
    }


# ── Procedures ────────────────────────────────────────────────────────

def procedure_rows(projects: Iterable[Project]) -> list[ProcedureRow]:
    return [
        ProcedureRow(proc, p.id, p.titre_du_dossier, p.acheteur)
        for p in projects
        for proc in p.procedures
    ]


def filter_procedures(
    rows: Iterable[ProcedureRow],
    q: str = "",
    procedure_type: str = "",
    buyer: str = "",
) -> list[ProcedureRow]:
    """Search id / number / project title / subject; procedure id desc."""
    needle = (q or "").strip().lower()
    out = []
    for row in rows:
        proc = row.procedure
        if needle and not any(needle in s.lower() for s in (
                proc.id, proc.numero_afpa, row.project_title, proc.objet_court)):
            continue
        if procedure_type and proc.type_de_procedure != procedure_type:
            continue
        if buyer and proc.acheteur != buyer:
            continue
        out.append(row)
    return sorted(out, key=lambda r: natural_key(r.procedure.id), reverse=True)


def procedure_stats(rows: Iterable[ProcedureRow]) -> dict:
    amounts = [parse_amount(r.procedure.montant_ht) for r in rows]
    total = sum(amounts)
    count = len(amounts)
    return {
        "count": count,
        "total": total,
        "average": total / count if count else 0.0,
    }


# ── Chart data ────────────────────────────────────────────────────────

def count_by(values: Iterable[str], default: str = NOT_DEFINED,
             limit: Optional[int] = None) -> list[dict]:
    """[{name, value}] sorted by count desc (ties keep first-seen order)."""
    counts = Counter(v or default for v in values)
    return [{"name": k, "value": n} for k, n in counts.most_common(limit)]


def dashboard(projects: list[Project]) -> dict:
    rows = procedure_rows(projects)
    return {
        "projects": len(projects),
        "procedures": len(rows),
        "total_ttc": sum(parse_amount(p.montant_ttc) for p in projects),
        "total_procedures_ht": sum(parse_amount(r.procedure.montant_ht) for r in rows),
        "by_status": count_by((p.statut_du_dossier for p in projects), limit=6),
        "by_priority": count_by(p.priorite for p in projects),
        "by_procedure_type": count_by(r.procedure.type_de_procedure for r in rows),
        "by_buyer": count_by((r.procedure.acheteur for r in rows),
                             default=NOT_ASSIGNED, limit=8),
    }
