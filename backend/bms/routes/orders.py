# Overview: Purchase-order pages; list, create (order + lines + derived bill), view, status change.

"""
Purchase Order routes

Creation runs the best-effort workflow in purchase_order_service. Failure
responses keep the step and line index so the page can tell the user
whether nothing was saved or the order was only partly created.
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import get_client, require_route_access, json_object
from ..services import purchase_order_service
from ..services.order_totals import compute_order_totals
from ..services.purchase_order_service import BILLABLE_STATUSES, PO_STATUSES, WorkflowError
from ..validation import ValidationError, clamp_page, money


orders_bp = Blueprint("orders", __name__, url_prefix="/orders")


def _workflow_failure_message(error: WorkflowError) -> str:
    if not error.partial:
        return "The purchase order could not be created. Nothing was saved."
    order_id = error.order.get("id")
    return (
        f"Purchase order #{order_id} was created but line item {error.index + 1} failed; "
        f"{len(error.created_lines)} line(s) were saved. Contact support to complete or remove it."
    )


@orders_bp.get("")
@require_route_access
def list_orders_route():
    """
    Query parameters:
    - status, vendor_id: exact filters
    - from, to: created_at range (inclusive)
    - sort: PostgREST order expression (default created_at.desc)
    - page, page_size: pagination (defaults 1, 10)
    """
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 10, type=int),
    )
    result = purchase_order_service.list_purchase_orders(
        get_client(),
        page=page,
        page_size=page_size,
        status=request.args.get("status"),
        vendor_id=request.args.get("vendor_id", type=int),
        from_date=request.args.get("from"),
        to_date=request.args.get("to"),
        sort=request.args.get("sort", "created_at.desc"),
    )
    return jsonify({"items": result.items, "count": result.total, "page": page, "page_size": page_size})


@orders_bp.get("/new")
@require_route_access
def new_order_route():
    """Form data: vendors, products and allowed statuses."""
    client = get_client()
    return jsonify({
        "vendors": client.list("vendors", order="name.asc").items,
        "products": client.list("products", order="name.asc").items,
        "statuses": list(PO_STATUSES),
    })


@orders_bp.post("/totals")
@require_route_access
def preview_totals_route():
    """Running totals for an order form that has not been submitted yet."""
    data = json_object()
    totals = compute_order_totals(data.get("lines") or [], data.get("default_tax_percent", 0))
    return jsonify({key: money(value) for key, value in totals.items()})


@orders_bp.post("")
@require_route_access
def create_order_route():
    """
    Request body:
    {
        "vendor_id": 3,               // required
        "po_number": "...",           // optional, generated when missing
        "po_date": "YYYY-MM-DD",      // optional, today
        "reference": "...",           // optional, generated when missing
        "status": "Draft|Confirmed|Converted",
        "lines": [{"product_id": 1, "qty": 2, "unit_price": 100, "tax_percent": 10}, ...]
    }

    Confirmed/Converted orders also get an Unpaid vendor bill.
    """
    try:
        data = json_object()
        lines = data.pop("lines", None) or []
        order = purchase_order_service.prepare_order(data)
        result = purchase_order_service.create_purchase_order_with_lines(get_client(), order, lines)
    except ValidationError as e:
        return jsonify({"error": str(e), "partial": False}), 400
    except WorkflowError as e:
        current_app.logger.warning("Purchase order workflow failed at %s: %s", e.step, e)
        body = e.to_dict()
        body["message"] = _workflow_failure_message(e)
        return jsonify(body), 502

    message = f"Purchase Order #{result.id} created successfully!"
    if result.bill is not None:
        message += " Vendor bill has been automatically generated."
    elif order["status"] in BILLABLE_STATUSES:
        message += " The vendor bill could not be generated; create it from the Bills page."
    return jsonify({"order": result.order, "bill": result.bill, "message": message}), 201


@orders_bp.get("/<int:order_id>")
@require_route_access
def get_order_route(order_id: int):
    order = purchase_order_service.get_purchase_order(get_client(), order_id)
    if order is None:
        return jsonify({"error": "Purchase order not found"}), 404
    order["totals"] = purchase_order_service.order_summary(order, order["lines"])
    return jsonify(order)


@orders_bp.patch("/<int:order_id>/status")
@require_route_access
def update_order_status_route(order_id: int):
    """Request body: {"status": "Confirmed"}"""
    data = json_object()
    try:
        order = purchase_order_service.update_status(get_client(), order_id, data.get("status"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(order)
