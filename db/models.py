"""
db.models - SQLAlchemy ORM declarations.

Tables
------
projects - one row per project ID.  The project (with its nested
           procedures and attachment records) is stored as a single
           JSON document so the spreadsheet column set can evolve
           without ALTER TABLE.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ProjectRecord(Base):
    __tablename__ = "projects"

    # ── Primary key ────────────────────────────────────────────────────
    id = Column(String(200), primary_key=True)                  # Project "ID"

    # ── Document ───────────────────────────────────────────────────────
    data = Column(Text, nullable=False, default="{}")

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc), index=True)

    # ── Serialisation ──────────────────────────────────────────────────
    def to_dict(self) -> dict:
        try:
            doc = json.loads(self.data or "{}")
        except json.JSONDecodeError:
            return {}
        return doc if isinstance(doc, dict) else {}

    def set_document(self, doc: dict) -> None:
        self.data = json.dumps(doc, ensure_ascii=False)
        self.updated_at = datetime.now(timezone.utc)
