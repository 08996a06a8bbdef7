"""
services.attachment_service - Document storage for projects / procedures.

Files live in a bucket directory under StorageConfig.root_dir and are
addressed by sanitised relative paths.  The store only moves bytes and
builds Attachment records; attaching them to a project is the caller's job.
"""

from __future__ import annotations

import logging
import mimetypes
import re
import time
import unicodedata
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from config import StorageConfig
from schema.entities import Attachment

logger = logging.getLogger(__name__)


class AttachmentNotFound(Exception):
    """Raised when a delete or lookup targets no stored file."""


def sanitize_path(path: str) -> str:
    """
    Strip accents and map anything outside [A-Za-z0-9./_-] to '_'.

    'project_42/Note d’opportunité.pdf' → 'project_42/Note_d_opportunite.pdf'
    """
    decomposed = unicodedata.normalize("NFD", path)
    clean = "".join(c for c in decomposed if not unicodedata.combining(c))
    clean = re.sub(r"\s+", "_", clean)
    clean = re.sub(r"[^a-zA-Z0-9./_-]", "_", clean)
    clean = re.sub(r"/+", "/", clean)
    clean = re.sub(r"_{2,}", "_", clean)
    return clean


def project_prefix(project_id: str) -> str:
    return f"project_{project_id}/no"


def procedure_prefix(project_id: str, procedure_id: str) -> str:
    return f"project_{project_id}/procedure_{procedure_id}/rp"


def unique_name(filename: str) -> str:
    """'{ms timestamp}_{filename}' so re-uploads never collide."""
    return f"{int(time.time() * 1000)}_{filename}"


class AttachmentStore:

    def __init__(self, storage: StorageConfig):
        self.storage = storage
        self.root = storage.bucket_dir

    # ── Paths ──────────────────────────────────────────────────────────

    def resolve(self, path: str) -> Path:
        """Absolute file path for *path*; refuses anything outside the bucket."""
        target = (self.root / path).resolve()
        if target != self.root and self.root not in target.parents:
            raise AttachmentNotFound(f"Path escapes bucket: {path}")
        return target

    def public_url(self, path: str) -> str:
        return f"{self.storage.public_url}/{quote(path)}"

    # ── Upload / delete ────────────────────────────────────────────────

    def upload(self, data: bytes, filename: str, prefix: str,
               content_type: str | None = None) -> Attachment:
        """Store *data* under '{prefix}/{timestamp}_{filename}' (overwrites)."""
        clean_path = sanitize_path(f"{prefix}/{unique_name(filename)}").lstrip("/")
        target = self.resolve(clean_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

        if not content_type or content_type == "application/octet-stream":
            guessed, _ = mimetypes.guess_type(filename)
            content_type = guessed or content_type or "application/octet-stream"

        logger.info(f"Stored attachment bucket={self.storage.bucket!r} path={clean_path!r}")
        return Attachment(
            name=filename,
            url=self.public_url(clean_path),
            size=len(data),
            type=content_type,
            uploaded_at=datetime.now(timezone.utc).isoformat(),
            path=clean_path,
        )

    def delete(self, path: str) -> None:
        if not path:
            return
        target = self.resolve(path)
        if not target.is_file():
            raise AttachmentNotFound(f"No stored file at {path!r}")
        target.unlink()
        logger.info(f"Deleted attachment path={path!r}")


def display_name(filename: str | None) -> str:
    """Original file name as shown to users; falls back to a safe name."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    return name or "document"
