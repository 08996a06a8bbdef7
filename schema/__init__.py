"""
schema - Entity records, canonical columns and referential lookups.

Public API:
    entities.Project / Procedure / Attachment
    fields.PROJECT_FIELDS / PROCEDURE_FIELDS
    numbering.synthesize_procedure_id / next_procedure_prefix / build_procedure_number
    loader.load / trigram_for / get_buyers / search_*
"""

from schema.entities import Attachment, Procedure, Project, split_list   # noqa: F401
from schema.loader import (                                              # noqa: F401
    load,
    get_buyers,
    trigram_for,
    search_families,
    search_sub_families,
    search_cpv,
    UNKNOWN_TRIGRAM,
)
from schema.numbering import (                                           # noqa: F401
    synthesize_procedure_id,
    next_procedure_prefix,
    build_procedure_number,
)
