# Overview: Accounts pages; vendor payables ledger and trial balance.

from flask import Blueprint, jsonify, request

from ..decorators import get_client, require_route_access
from ..services import ledger_service
from ..validation import ValidationError


accounts_bp = Blueprint("accounts", __name__, url_prefix="/accounts")


@accounts_bp.get("/ledger")
@require_route_access
def ledger_route():
    """
    Query parameters:
    - vendor_id: required to produce entries; without it the vendor list is returned
    - from, to: inclusive date range (YYYY-MM-DD)
    """
    client = get_client()
    vendor_id = request.args.get("vendor_id", type=int)
    if vendor_id is None:
        return jsonify({"vendors": client.list("vendors", order="name.asc").items, "entries": []})

    try:
        ledger = ledger_service.vendor_ledger(
            client,
            vendor_id,
            from_date=request.args.get("from"),
            to_date=request.args.get("to"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(ledger)


@accounts_bp.get("/trial-balance")
@require_route_access
def trial_balance_route():
    return jsonify(ledger_service.trial_balance(get_client()))
