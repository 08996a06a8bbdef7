"""
api.routes_referential - /api/v1/referential/* lookups.

Buyer directory (name → trigram), purchase families / sub-families and
CPV codes, used by the project and procedure forms.
"""

from flask import request, jsonify

from api import api_bp
from schema import loader


@api_bp.route("/referential/buyers")
def referential_buyers():
    return jsonify(loader.get_buyers())


@api_bp.route("/referential/trigram")
def referential_trigram():
    """GET ?name=  - unknown names resolve to 'ZZZ'."""
    name = request.args.get("name", "")
    return jsonify({"name": name, "trigram": loader.trigram_for(name)})


@api_bp.route("/referential/families")
def referential_families():
    return jsonify(loader.search_families(request.args.get("q", "")))


@api_bp.route("/referential/sub-families")
def referential_sub_families():
    return jsonify(loader.search_sub_families(request.args.get("q", "")))


@api_bp.route("/referential/cpv")
def referential_cpv():
    """GET ?q=  - at least two characters; matches code or title."""
    return jsonify(loader.search_cpv(request.args.get("q", "")))
