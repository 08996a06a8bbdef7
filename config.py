"""
Procurement portfolio - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR          = Path(__file__).resolve().parent
REFERENTIAL_PATH  = Path(os.environ.get("PORTFOLIO_REFERENTIAL", BASE_DIR / "referential.json"))
EXPORT_DIR        = Path(os.environ.get("PORTFOLIO_EXPORT_DIR", BASE_DIR / "exports"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("PORTFOLIO_DB", f"sqlite:///{BASE_DIR / 'portfolio.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("PORTFOLIO_HOST", "0.0.0.0")
PORT   = int(os.environ.get("PORTFOLIO_PORT", "5000"))
DEBUG  = os.environ.get("PORTFOLIO_DEBUG", "0") == "1"
SECRET = os.environ.get("PORTFOLIO_SECRET", "portfolio-dev-key-change-in-prod")
LOG_LEVEL = os.environ.get("PORTFOLIO_LOG_LEVEL", "INFO").upper()

# ── Uploads ────────────────────────────────────────────────────────────
MAX_UPLOAD_MB = int(os.environ.get("PORTFOLIO_MAX_UPLOAD_MB", "50"))

# ── Referential search limits ──────────────────────────────────────────
FAMILY_SEARCH_LIMIT = 2000
CPV_SEARCH_LIMIT    = 30
CPV_MIN_TERM_LENGTH = 2


@dataclass(frozen=True)
class StorageConfig:
    """Where attachments live and how their public URL is built."""

    root_dir: Path
    bucket: str = "Projets DNA"
    public_url: str = "/api/v1/files"

    @property
    def bucket_dir(self) -> Path:
        return (self.root_dir / self.bucket).resolve()

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            root_dir=Path(os.environ.get("PORTFOLIO_STORAGE_DIR", BASE_DIR / "storage")),
            bucket=os.environ.get("PORTFOLIO_BUCKET", "Projets DNA"),
            public_url=os.environ.get("PORTFOLIO_PUBLIC_URL", "/api/v1/files").rstrip("/"),
        )
