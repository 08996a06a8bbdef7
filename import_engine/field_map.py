"""
import_engine.field_map - Source-column quirks of the portfolio workbook.

The canonical column set lives in schema.fields.  This module only
records what the importer reads differently from it: source-only
columns and fallback chains (first non-empty value wins).
"""

from schema.fields import (
    PROJECT_FIELDS, PROCEDURE_FIELDS, AMOUNT_HT, AMOUNT_TTC,
)

# Column holding the project key
SOURCE_PROJECT_ID = "ID"

# Column holding a supplied procedure id (absent → synthesised)
SOURCE_PROCEDURE_ID = "Procedure_ID_Interne"

# Procedure column  →  source columns tried in order
PROCEDURE_SOURCES: dict[str, tuple[str, ...]] = {
    col: (col,) for col in PROCEDURE_FIELDS
}
PROCEDURE_SOURCES["Acheteur"] = ("Proc_Acheteur", "Acheteur")

# Project column  →  source columns tried in order
PROJECT_SOURCES: dict[str, tuple[str, ...]] = {
    col: (col,) for col in PROJECT_FIELDS
}
PROJECT_SOURCES[AMOUNT_TTC] = (AMOUNT_TTC, AMOUNT_HT)
PROJECT_SOURCES["NO - Nom des valideurs"] = ("NO - Nom des valideurs", "Nom des valideurs")
PROJECT_SOURCES["NO - Commentaire"] = ("NO - Commentaire", "Commentaire général sur le projet")
