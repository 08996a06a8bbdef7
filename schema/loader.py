"""
schema.loader - Parse referential.json at startup and expose lookup helpers.

This module owns the in-memory copies of the buyer directory (names →
trigram), the purchase family / sub-family segmentation and the CPV
code list.  A missing file is not fatal: lookups then degrade
(unknown buyers resolve to UNKNOWN_TRIGRAM, searches return nothing).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import config

logger = logging.getLogger(__name__)

UNKNOWN_TRIGRAM = "ZZZ"

# ── Module-level state (populated by load()) ──────────────────────────
_trigrams: dict[str, str] = {}            # lower-cased buyer name → trigram
_buyers: list[str] = []
_families: list[str] = []
_sub_families: list[str] = []
_cpv: list[dict] = []


def _unique_sorted(values) -> list[str]:
    cleaned = {str(v).strip() for v in values if v is not None}
    return sorted(v for v in cleaned if v and v not in ("null", "undefined"))


def load(referential_path: str | Path) -> dict:
    """
    Read referential.json.  Returns a stats dict for logging.
    """
    global _buyers, _families, _sub_families, _cpv

    path = Path(referential_path)
    data: dict = {}
    if path.exists():
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    else:
        logger.warning(f"Referential not found: {path} - buyer codes default to {UNKNOWN_TRIGRAM}")

    _trigrams.clear()
    names = []
    for row in data.get("buyers", []):
        name = str(row.get("personne") or "").strip()
        if not name:
            continue
        names.append(name)
        code = str(row.get("trigramme") or "").strip().upper()
        _trigrams[name.lower()] = code or UNKNOWN_TRIGRAM

    _buyers = _unique_sorted(names)
    _families = _unique_sorted(data.get("families", []))
    _sub_families = _unique_sorted(data.get("sub_families", []))
    _cpv = [c for c in data.get("cpv", []) if isinstance(c, dict)]

    return {
        "buyers": len(_buyers),
        "families": len(_families),
        "sub_families": len(_sub_families),
        "cpv": len(_cpv),
    }


# ── Public helpers ────────────────────────────────────────────────────

def get_buyers() -> list[str]:
    return list(_buyers)


def trigram_for(name: str) -> str:
    """Three-letter code for a buyer name; UNKNOWN_TRIGRAM when unresolved."""
    if not name or not name.strip():
        return UNKNOWN_TRIGRAM
    return _trigrams.get(name.strip().lower(), UNKNOWN_TRIGRAM)


def _search(values: list[str], term: str) -> list[str]:
    term = (term or "").strip().lower()
    hits = [v for v in values if term in v.lower()] if term else values
    return hits[:config.FAMILY_SEARCH_LIMIT]


def search_families(term: str = "") -> list[str]:
    return _search(_families, term)


def search_sub_families(term: str = "") -> list[str]:
    return _search(_sub_families, term)


def search_cpv(term: str) -> list[str]:
    """Return 'code - title' strings matching *term* on code or title."""
    term = (term or "").strip()
    if len(term) < config.CPV_MIN_TERM_LENGTH:
        return []
    needle = term.lower()
    out: list[str] = []
    for row in _cpv:
        code = str(row.get("code") or "")
        title = str(row.get("titre") or "")
        if needle in code.lower() or needle in title.lower():
            out.append(f"{code} - {title}".strip())
            if len(out) >= config.CPV_SEARCH_LIMIT:
                break
    return out
