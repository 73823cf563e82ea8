# Overview: Product pages; list, create, view, edit, delete.

from flask import Blueprint, jsonify, request

from ..decorators import get_client, require_route_access, json_object
from ..services import product_service
from ..services.product_service import ProductNotFoundError
from ..validation import ValidationError, clamp_page


products_bp = Blueprint("products", __name__, url_prefix="/products")


@products_bp.get("")
@require_route_access
def list_products_route():
    """
    Query parameters:
    - search: case-insensitive name match
    - category: exact category
    - page, page_size: pagination (defaults 1, 50)
    """
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 50, type=int),
    )
    result = product_service.list_products(
        get_client(),
        search=request.args.get("search"),
        category=request.args.get("category"),
        page=page,
        page_size=page_size,
    )
    return jsonify({"items": result.items, "count": result.total, "page": page, "page_size": page_size})


@products_bp.post("")
@require_route_access
def create_product_route():
    data = json_object()
    try:
        product = product_service.create_product(get_client(), data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(product), 201


@products_bp.get("/<int:product_id>")
@require_route_access
def get_product_route(product_id: int):
    try:
        return jsonify(product_service.get_product(get_client(), product_id))
    except ProductNotFoundError:
        return jsonify({"error": "Product not found"}), 404


@products_bp.route("/<int:product_id>", methods=["PUT", "PATCH"])
@require_route_access
def update_product_route(product_id: int):
    data = json_object()
    try:
        return jsonify(product_service.update_product(get_client(), product_id, data))
    except ProductNotFoundError:
        return jsonify({"error": "Product not found"}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@products_bp.delete("/<int:product_id>")
@require_route_access
def delete_product_route(product_id: int):
    product_service.delete_product(get_client(), product_id)
    return "", 204
