"""
services - Business-logic layer sitting between API and DB.
"""

from services.projects_service import ProjectsService, add_procedure     # noqa: F401
from services.attachment_service import AttachmentStore, AttachmentNotFound  # noqa: F401
from services.amounts import parse_amount, format_currency             # noqa: F401
from services import portfolio_service                                 # noqa: F401
