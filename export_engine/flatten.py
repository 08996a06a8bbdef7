"""
export_engine.flatten - Projects → one flat row per procedure.

Output order follows the input: projects in iteration order, then each
project's procedures in list order.  Projects without procedures yield
no row.  Every row carries every column in EXPORT_COLUMNS.
"""

from __future__ import annotations

from typing import Iterable

from schema.entities import Project

# Export header  →  (source record, canonical column)
_PROJECTION: dict[str, tuple[str, str]] = {
    "Numéro de procédure (Afpa)": ("procedure", "Numéro de procédure (Afpa)"),
    "ID Procédure":               ("procedure", "id"),
    "Objet de la procédure":      ("procedure", "Objet court"),
    "Acheteur Procédure":         ("procedure", "Acheteur"),
    "Type de procédure":          ("procedure", "Type de procédure"),
    "Montant Procédure (€ HT)":   ("procedure", "Montant prévisionnel du marché (€ HT)"),
    "Date Lancement":             ("procedure", "Date de lancement de la consultation"),
    # Attribution
    "Date des Rejets":            ("procedure", "Date des Rejets"),
    "Avis d'attribution":         ("procedure", "Avis d'attribution"),
    "Données essentielles":       ("procedure", "Données essentielles"),
    "Statut de la consultation":  ("procedure", "Statut de la consultation"),
    # Parent project
    "ID Projet":                  ("project", "ID"),
    "Projet":                     ("project", "Titre du dossier"),
    "Statut Projet":              ("project", "Statut du Dossier"),
}

EXPORT_COLUMNS: tuple[str, ...] = tuple(_PROJECTION)


def flatten_procedures(projects: Iterable[Project]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for project in projects:
        for proc in project.procedures or []:
            sources = {"project": project, "procedure": proc}
            rows.append({
                header: sources[kind].get(column) or ""
                for header, (kind, column) in _PROJECTION.items()
            })
    return rows
