"""
api.routes_procedures - Flat procedure listing and dashboard figures.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from services.projects_service import ProjectsService
from services.portfolio_service import (
    dashboard, filter_procedures, procedure_rows, procedure_stats, unique_values,
)


def _load_projects():
    session = get_session()
    try:
        return ProjectsService.get_all(session)
    finally:
        session.close()


@api_bp.route("/procedures")
def list_procedures():
    """
    GET /api/v1/procedures?q=&type=&buyer=

    One entry per procedure with its project's ID / title / buyer,
    plus count, HT total and average of the filtered set.
    """
    q     = request.args.get("q", "").strip()
    ptype = request.args.get("type", "").strip()
    buyer = request.args.get("buyer", "").strip()

    all_rows = procedure_rows(_load_projects())
    rows = filter_procedures(all_rows, q=q, procedure_type=ptype, buyer=buyer)
    return jsonify({
        "stats": procedure_stats(rows),
        "types": unique_values(r.procedure.type_de_procedure for r in all_rows),
        "buyers": unique_values(r.procedure.acheteur for r in all_rows),
        "procedures": [r.to_dict() for r in rows],
    })


@api_bp.route("/stats")
def portfolio_stats():
    """GET /api/v1/stats  - counts by status / priority / type / buyer."""
    return jsonify(dashboard(_load_projects()))
