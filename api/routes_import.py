"""
api.routes_import - /api/v1/import endpoint.

Accepts an .xlsx workbook via multipart file upload or raw request body.
"""

from flask import request, jsonify

from api import api_bp
from import_engine import run_import


@api_bp.route("/import", methods=["POST"])
def api_import_workbook():
    """
    POST /api/v1/import?persist=0|1

    Multipart: field name 'file'
    Or: raw workbook as request body.
    A file that cannot be read or yields no project answers 400.
    """
    persist = request.args.get("persist", "1") != "0"

    if request.content_type and "multipart" in request.content_type:
        f = request.files.get("file")
        if not f:
            return jsonify({"error": "no file in upload"}), 400
        content = f.read()
    else:
        content = request.get_data()

    if not content:
        return jsonify({"error": "empty body"}), 400

    report = run_import(content, persist=persist)
    payload = report.to_dict()
    if not persist:
        payload["preview"] = [p.to_dict() for p in report.entities]
    return jsonify(payload)
