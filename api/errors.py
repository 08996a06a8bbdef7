"""
api.errors - JSON error handlers for the API blueprint.
"""

import logging

from flask import jsonify

from api import api_bp
from import_engine import ImportFailure
from export_engine import ExportError
from services.attachment_service import AttachmentNotFound

logger = logging.getLogger(__name__)


@api_bp.errorhandler(ImportFailure)
def api_import_failed(e):
    logger.warning(f"Import rejected: {e}")
    return jsonify({"error": e.user_message, "detail": str(e)}), 400


@api_bp.errorhandler(ExportError)
def api_export_failed(e):
    logger.error(f"Export failed: {e}")
    return jsonify({"error": "export failed", "detail": str(e)}), 500


@api_bp.errorhandler(AttachmentNotFound)
def api_attachment_missing(e):
    return jsonify({"error": str(e)}), 404


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(403)
def api_forbidden(_e):
    return jsonify({"error": "forbidden"}), 403


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return jsonify({"error": "bad request"}), 400


@api_bp.errorhandler(413)
def api_too_large(_e):
    return jsonify({"error": "file too large"}), 413


@api_bp.errorhandler(500)
def api_server_error(_e):
    return jsonify({"error": "internal server error"}), 500
