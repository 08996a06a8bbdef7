"""
schema.numbering - Procedure identifiers and display numbers.

Internal id:     {ProjectID}-P{n}        n = 1-based position in the project
Display number:  {YYSSS} - {subject} - {trigram}
                 YY = two-digit year, SSS = sequence starting at 500
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

FIRST_SEQUENCE = 500
PREFIX_LENGTH = 5


def synthesize_procedure_id(project_id: str, position: int) -> str:
    """Fallback procedure id for 1-based *position* inside a project."""
    return f"{project_id}-P{position}"


def next_procedure_prefix(projects: Iterable, today: Optional[date] = None) -> str:
    """
    Return the next free 'YYSSS' prefix for the current year.

    Scans every procedure number starting with the two-digit year and
    takes the highest trailing sequence (never below FIRST_SEQUENCE - 1).
    """
    year = (today or date.today()).strftime("%y")
    pattern = re.compile(rf"^{year}(\d{{3,}})")

    max_seq = FIRST_SEQUENCE - 1
    for project in projects:
        for proc in project.procedures:
            m = pattern.match(proc.numero_afpa or "")
            if m:
                max_seq = max(max_seq, int(m.group(1)))
    return f"{year}{max_seq + 1}"


def build_procedure_number(prefix: str, subject: str, trigram: str) -> str:
    """Assemble the 'Numéro de procédure (Afpa)' display string."""
    return f"{prefix[:PREFIX_LENGTH]} - {(subject or '').strip()} - {trigram}"
