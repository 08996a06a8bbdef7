"""
api.routes_export - /api/v1/export workbook download.
"""

import io

from flask import request, send_file

from api import api_bp
from db import get_session
from export_engine import DEFAULT_FILE_NAME, flatten_procedures, workbook_bytes
from services.projects_service import ProjectsService

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@api_bp.route("/export")
def export_workbook():
    """GET /api/v1/export?filename=  - procedures report as .xlsx"""
    file_name = request.args.get("filename", "").strip() or DEFAULT_FILE_NAME
    if not file_name.lower().endswith(".xlsx"):
        file_name += ".xlsx"

    session = get_session()
    try:
        projects = ProjectsService.get_all(session)
    finally:
        session.close()

    data = workbook_bytes(flatten_procedures(projects))
    return send_file(
        io.BytesIO(data),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=file_name,
    )
