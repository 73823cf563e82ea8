# Overview: Payment pages; list and record payments against vendor bills.

from flask import Blueprint, jsonify, request

from ..decorators import get_client, require_route_access, json_object
from ..services import payment_service
from ..validation import ValidationError, clamp_page


payments_bp = Blueprint("payments", __name__, url_prefix="/payments")


@payments_bp.get("")
@require_route_access
def list_payments_route():
    page, page_size = clamp_page(
        request.args.get("page", 1, type=int),
        request.args.get("page_size", 50, type=int),
    )
    result = payment_service.list_payments(
        get_client(),
        vendor_bill_id=request.args.get("vendor_bill_id", type=int),
        page=page,
        page_size=page_size,
    )
    return jsonify({"items": result.items, "count": result.total, "page": page, "page_size": page_size})


@payments_bp.post("")
@require_route_access
def record_payment_route():
    """
    Request body:
    {
        "vendor_bill_id": 7,      // required
        "amount": 500,            // required, > 0
        "paid_at": "YYYY-MM-DD",  // optional, today
        "method": "...",
        "reference": "..."
    }
    """
    data = json_object()
    try:
        payment = payment_service.record_payment(get_client(), data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(payment), 201
