"""
api.routes_attachments - Upload / delete / serve project documents.

Two attachment lists exist: the project's opportunity note documents
(no_attachments) and each procedure's presentation report documents
(rp_attachments).  Stored files are served from /api/v1/files/<path>.
"""

from flask import abort, current_app, jsonify, request, send_file

from api import api_bp
from db import get_session
from services.attachment_service import (
    AttachmentNotFound, AttachmentStore, display_name,
    procedure_prefix, project_prefix,
)
from services.projects_service import ProjectsService


def _store() -> AttachmentStore:
    return current_app.extensions["attachment_store"]


def _uploaded_file():
    f = request.files.get("file")
    if not f or not f.filename:
        return None, None
    return f, f.read()


def _attach(project_id: str, procedure_id: str | None):
    f, data = _uploaded_file()
    if f is None:
        return jsonify({"error": "no file in upload"}), 400

    store = _store()
    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        if not project:
            return jsonify({"error": "not found"}), 404
        if procedure_id is None:
            target_list = project.no_attachments
            prefix = project_prefix(project.id)
        else:
            proc = project.find_procedure(procedure_id)
            if not proc:
                return jsonify({"error": "procedure not found"}), 404
            target_list = proc.rp_attachments
            prefix = procedure_prefix(project.id, proc.id)

        attachment = store.upload(data, display_name(f.filename), prefix, f.mimetype)
        target_list.append(attachment)
        try:
            ProjectsService.save(session, project)
            session.commit()
        except Exception:
            store.delete(attachment.path)
            raise
        return jsonify(attachment.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _detach(project_id: str, procedure_id: str | None):
    path = request.args.get("path", "").strip()
    if not path:
        return jsonify({"error": "path is required"}), 400

    session = get_session()
    try:
        project = ProjectsService.get(session, project_id)
        if not project:
            return jsonify({"error": "not found"}), 404
        if procedure_id is None:
            owner, attr = project, "no_attachments"
        else:
            owner, attr = project.find_procedure(procedure_id), "rp_attachments"
            if owner is None:
                return jsonify({"error": "procedure not found"}), 404

        current = getattr(owner, attr)
        remaining = [a for a in current if a.path != path]
        if len(remaining) == len(current):
            raise AttachmentNotFound(f"No attachment with path {path!r}")

        _store().delete(path)
        setattr(owner, attr, remaining)
        ProjectsService.save(session, project)
        session.commit()
        return jsonify({"deleted": path})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/attachments", methods=["POST"])
def upload_project_attachment(project_id: str):
    """POST …/projects/{ID}/attachments  (multipart 'file')"""
    return _attach(project_id, None)


@api_bp.route("/projects/<project_id>/procedures/<procedure_id>/attachments",
              methods=["POST"])
def upload_procedure_attachment(project_id: str, procedure_id: str):
    """POST …/procedures/{id}/attachments  (multipart 'file')"""
    return _attach(project_id, procedure_id)


@api_bp.route("/projects/<project_id>/attachments", methods=["DELETE"])
def delete_project_attachment(project_id: str):
    """DELETE …/projects/{ID}/attachments?path="""
    return _detach(project_id, None)


@api_bp.route("/projects/<project_id>/procedures/<procedure_id>/attachments",
              methods=["DELETE"])
def delete_procedure_attachment(project_id: str, procedure_id: str):
    """DELETE …/procedures/{id}/attachments?path="""
    return _detach(project_id, procedure_id)


@api_bp.route("/files/<path:path>")
def serve_file(path: str):
    """Serve a stored attachment; paths outside the bucket are refused."""
    try:
        target = _store().resolve(path)
    except AttachmentNotFound:
        abort(403)
    if not target.is_file():
        abort(404)
    return send_file(target)
