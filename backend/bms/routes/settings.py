# Overview: Admin settings; HSN code cache and data API health.

from flask import Blueprint, jsonify, request

from ..decorators import get_client, require_route_access, json_object
from ..services import hsn_service
from ..services.resource_client import ResourceError
from ..validation import ValidationError, clamp_page


settings_bp = Blueprint("settings", __name__, url_prefix="/settings")


@settings_bp.get("")
@require_route_access
def settings_route():
    """Data API reachability for the settings page."""
    try:
        get_client().ping()
        api_status = "ok"
    except ResourceError as e:
        api_status = f"unavailable: {e}"
    return jsonify({"data_api": api_status})


@settings_bp.get("/hsn")
@require_route_access
def list_hsn_route():
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 100, type=int),
    )
    result = hsn_service.list_codes(get_client(), page=page, page_size=page_size)
    return jsonify({"items": result.items, "count": result.total, "page": page, "page_size": page_size})


@settings_bp.get("/hsn/<code>")
@require_route_access
def get_hsn_route(code: str):
    record = hsn_service.get_by_code(get_client(), code)
    if record is None:
        return jsonify({"error": "HSN code not cached"}), 404
    return jsonify(record)


@settings_bp.put("/hsn")
@require_route_access
def upsert_hsn_route():
    """Request body: {"hsn_code": "8471", "description": "...", "gst_rate": 18}"""
    data = json_object()
    try:
        return jsonify(hsn_service.upsert(get_client(), data))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@settings_bp.patch("/hsn/<id_or_code>")
@require_route_access
def update_hsn_route(id_or_code: str):
    record = hsn_service.update(get_client(), id_or_code, json_object())
    if record is None:
        return jsonify({"error": "HSN code not cached"}), 404
    return jsonify(record)


@settings_bp.delete("/hsn/<id_or_code>")
@require_route_access
def delete_hsn_route(id_or_code: str):
    hsn_service.delete(get_client(), id_or_code)
    return "", 204
