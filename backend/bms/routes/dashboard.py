# Overview: Dashboard, role dashboards, inventory and report pages.

from flask import Blueprint, jsonify, request

from ..decorators import current_session, get_client, require_route_access
from ..permissions import role_description
from ..services import product_service, reporting_service
from ..validation import clamp_page


dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.get("/")
@require_route_access
def dashboard_route():
    ctx = current_session()
    return jsonify({
        "user": ctx.identity.to_dict(),
        "role": role_description(ctx.role),
        "stats": reporting_service.dashboard_stats(get_client()),
    })


@dashboard_bp.get("/sales")
@require_route_access
def sales_dashboard_route():
    ctx = current_session()
    client = get_client()
    return jsonify({
        "user": ctx.identity.to_dict(),
        "role": role_description(ctx.role),
        "active_products": client.list("products", limit=1, count=True).total,
    })


@dashboard_bp.get("/inventory")
@require_route_access
def inventory_route():
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 10, type=int),
    )
    result = product_service.list_products(
        get_client(), search=request.args.get("search"), page=page, page_size=page_size
    )
    return jsonify({"items": result.items, "count": result.total, "page": page, "page_size": page_size})


@dashboard_bp.get("/analytics")
@require_route_access
def analytics_route():
    client = get_client()
    return jsonify({
        "stats": reporting_service.dashboard_stats(client),
        "purchases": reporting_service.purchase_report(client),
    })


@dashboard_bp.get("/reports")
@require_route_access
def reports_route():
    """Purchase summary; from/to filter on po_date (inclusive)."""
    return jsonify(reporting_service.purchase_report(
        get_client(),
        from_date=request.args.get("from"),
        to_date=request.args.get("to"),
    ))
