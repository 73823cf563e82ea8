# Overview: Vendor bill pages; list with overdue flagging, manual creation, status change.

from flask import Blueprint, jsonify, request

from ..decorators import get_client, require_route_access, json_object
from ..services import vendor_bill_service
from ..validation import ValidationError, clamp_page


bills_bp = Blueprint("bills", __name__, url_prefix="/bills")


@bills_bp.get("")
@require_route_access
def list_bills_route():
    """
    Query parameters:
    - status, vendor_id: exact filters
    - page, page_size: pagination (defaults 1, 50)

    Unpaid bills past their due date are reported as Overdue.
    """
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 50, type=int),
    )
    result = vendor_bill_service.list_bills(
        get_client(),
        status=request.args.get("status"),
        vendor_id=request.args.get("vendor_id", type=int),
        page=page,
        page_size=page_size,
    )
    return jsonify({
        "items": vendor_bill_service.mark_overdue(result.items),
        "count": result.total,
        "page": page,
        "page_size": page_size,
    })


@bills_bp.get("/new")
@require_route_access
def new_bill_route():
    """Form data: purchase orders and vendors."""
    client = get_client()
    return jsonify({
        "orders": client.list("purchase_orders", order="created_at.desc").items,
        "vendors": client.list("vendors", order="name.asc").items,
        "statuses": list(vendor_bill_service.BILL_STATUSES),
    })


@bills_bp.post("")
@require_route_access
def create_bill_route():
    """
    Request body:
    {
        "bill_number": "...",         // required
        "vendor_id": 3,               // required unless purchase_order_id given
        "purchase_order_id": 12,      // optional
        "amount": 1200.50,            // required unless purchase_order_id given
        "bill_date": "YYYY-MM-DD",
        "due_date": "YYYY-MM-DD",
        "status": "Unpaid|Paid|Overdue",
        "description": "..."
    }
    """
    data = json_object()
    try:
        bill = vendor_bill_service.create_bill(get_client(), data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(bill), 201


@bills_bp.patch("/<int:bill_id>/status")
@require_route_access
def update_bill_status_route(bill_id: int):
    data = json_object()
    try:
        bill = vendor_bill_service.set_status(get_client(), bill_id, data.get("status"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    if bill is None:
        return jsonify({"error": "Vendor bill not found"}), 404
    return jsonify(bill)
