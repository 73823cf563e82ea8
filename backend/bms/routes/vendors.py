# Overview: Vendor pages; list, create, view, edit, delete.

from flask import Blueprint, jsonify, request

from ..decorators import get_client, require_route_access, json_object
from ..services import vendor_service
from ..services.vendor_service import VendorNotFoundError
from ..validation import ValidationError, clamp_page


vendors_bp = Blueprint("vendors", __name__, url_prefix="/vendors")


@vendors_bp.get("")
@require_route_access
def list_vendors_route():
    """
    Query parameters:
    - search: case-insensitive name match
    - page, page_size: pagination (defaults 1, 50)

    Returns:
        {items: Vendor[], count: int, page: int, page_size: int}
    """
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 50, type=int),
    )
    result = vendor_service.list_vendors(
        get_client(), search=request.args.get("search"), page=page, page_size=page_size
    )
    return jsonify({"items": result.items, "count": result.total, "page": page, "page_size": page_size})


@vendors_bp.post("")
@require_route_access
def create_vendor_route():
    """
    Request body:
    {
        "name": "Vendor Name",      // required
        "contact_person": "...",
        "email": "...",
        "phone": "...",
        "address": "..."
    }
    """
    data = json_object()
    try:
        vendor = vendor_service.create_vendor(get_client(), data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(vendor), 201


@vendors_bp.get("/<int:vendor_id>")
@require_route_access
def get_vendor_route(vendor_id: int):
    try:
        return jsonify(vendor_service.get_vendor(get_client(), vendor_id))
    except VendorNotFoundError:
        return jsonify({"error": "Vendor not found"}), 404


@vendors_bp.route("/<int:vendor_id>", methods=["PUT", "PATCH"])
@require_route_access
def update_vendor_route(vendor_id: int):
    data = json_object()
    try:
        return jsonify(vendor_service.update_vendor(get_client(), vendor_id, data))
    except VendorNotFoundError:
        return jsonify({"error": "Vendor not found"}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@vendors_bp.delete("/<int:vendor_id>")
@require_route_access
def delete_vendor_route(vendor_id: int):
    vendor_service.delete_vendor(get_client(), vendor_id)
    return "", 204
