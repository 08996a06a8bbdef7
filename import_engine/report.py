"""
import_engine.report - Outcome of one workbook import.

Whole-file failures raise (see import_engine.errors); everything that
only affects single rows is collected here instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from schema.entities import Project


@dataclass
class ImportReport:
    total_rows: int = 0
    skipped: int = 0
    projects: int = 0
    procedures: int = 0
    persisted: bool = False
    errors: list[dict] = field(default_factory=list)   # [{row, reason}]
    entities: list[Project] = field(default_factory=list, repr=False)

    def skip(self, row: int, reason: str) -> None:
        """Record sheet row *row* (1-based, header = 1) as not imported."""
        self.errors.append({"row": row, "reason": reason})
        self.skipped += 1

    def summary(self) -> str:
        return (f"{self.projects} projects / {self.procedures} procedures "
                f"from {self.total_rows} rows ({self.skipped} skipped)")

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "skipped": self.skipped,
            "projects": self.projects,
            "procedures": self.procedures,
            "persisted": self.persisted,
            "project_ids": [p.id for p in self.entities],
            "errors": self.errors,
        }
