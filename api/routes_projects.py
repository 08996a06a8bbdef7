"""
api.routes_projects - /api/v1/projects CRUD endpoints.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from schema.entities import Project
from services.projects_service import (
    ProjectsService, add_procedure, regenerate_procedure_number,
)
from services.amounts import format_currency
from services.portfolio_service import filter_projects, project_totals


@api_bp.route("/projects")
def list_projects():
    """
    GET /api/v1/projects?q=&status=&status=&buyer=

    Search by title / ID, filter on one or more statuses and on buyer.
    """
    q        = request.args.get("q", "").strip()
    statuses = [s for s in request.args.getlist("status") if s]
    buyer    = request.args.get("buyer", "").strip()

    session = get_session()
    try:
        projects = ProjectsService.get_all(session)
    finally:
        session.close()

    projects = filter_projects(projects, q=q, statuses=statuses, buyer=buyer)
    totals = [project_totals(p) for p in projects]
    ttc = sum(t["ttc"] for t in totals)
    procedures_ht = sum(t["procedures_ht"] for t in totals)
    return jsonify({
        "total": len(projects),
        "amounts": {
            "ttc": ttc,
            "procedures_ht": procedures_ht,
            "ttc_display": format_currency(ttc),
            "procedures_ht_display": format_currency(procedures_ht),
        },
        "projects": [p.to_dict() for p in projects],
    })


@api_bp.route("/projects/<project_id>")
def get_project(project_id: str):
    """GET /api/v1/projects/{ID}"""
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        if not project:
            return jsonify({"error": "not found"}), 404
        return jsonify({"project": project.to_dict(),
                        "totals": project_totals(project)})
    finally:
        session.close()


@api_bp.route("/projects/<project_id>", methods=["PUT"])
def save_project(project_id: str):
    """PUT /api/v1/projects/{ID}  (JSON project document; path ID wins)"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object expected"}), 400

    project = Project.from_dict(data)
    project.id = project_id.strip()
    session = get_session()
    try:
        ProjectsService.save(session, project)
        session.commit()
        return jsonify(project.to_dict())
    except ValueError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/bulk", methods=["POST"])
def save_projects_bulk():
    """POST /api/v1/projects/bulk  (JSON list of project documents)"""
    data = request.get_json(silent=True)
    if not isinstance(data, list):
        return jsonify({"error": "JSON list expected"}), 400

    projects = [Project.from_dict(d) for d in data if isinstance(d, dict)]
    session = get_session()
    try:
        saved = ProjectsService.save_bulk(session, projects)
        session.commit()
        return jsonify({"saved": saved})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>", methods=["DELETE"])
def delete_project(project_id: str):
    """DELETE /api/v1/projects/{ID}"""
    session = get_session()
    try:
        if not ProjectsService.delete(session, project_id):
            return jsonify({"error": "not found"}), 404
        session.commit()
        return jsonify({"deleted": project_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects", methods=["DELETE"])
def clear_projects():
    """DELETE /api/v1/projects  - wipe the whole portfolio."""
    session = get_session()
    try:
        count = ProjectsService.clear(session)
        session.commit()
        return jsonify({"deleted": count})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/procedures", methods=["POST"])
def create_procedure(project_id: str):
    """
    POST /api/v1/projects/{ID}/procedures

    Append a blank procedure: id '{ID}-P{n}', buyer inherited from the
    project, display number generated from the buyer's trigram.
    """
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        if not project:
            return jsonify({"error": "not found"}), 404
        proc = add_procedure(project, ProjectsService.get_all(session))
        ProjectsService.save(session, project)
        session.commit()
        return jsonify(proc.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/procedures/<procedure_id>/number",
              methods=["POST"])
def regenerate_number(project_id: str, procedure_id: str):
    """POST …/procedures/{id}/number  - rebuild 'Numéro de procédure (Afpa)'."""
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        proc = project.find_procedure(procedure_id) if project else None
        if not proc:
            return jsonify({"error": "not found"}), 404
        number = regenerate_procedure_number(
            project, proc, ProjectsService.get_all(session))
        ProjectsService.save(session, project)
        session.commit()
        return jsonify({"id": proc.id, "Numéro de procédure (Afpa)": number})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
