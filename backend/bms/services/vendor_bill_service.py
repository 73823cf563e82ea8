# Overview: Manually entered vendor bills; validation, listing, overdue flagging.

"""
Vendor Bills

Bills are created either here (entered by hand) or derived from a purchase
order by purchase_order_service. purchase_order_id is a lookup reference
only: deleting or editing the order never touches the bill, and the bill's
amount is independent of the order once created.
"""

from __future__ import annotations

import logging
from datetime import date

from .resource_client import ResourceClient, eq
from ..time_utils import parse_iso_date, try_parse_iso_date, today_iso, to_utc_z, utcnow
from ..validation import ValidationError, compact, is_blank, money, parse_amount, parse_id


logger = logging.getLogger(__name__)


class BillStatus:
    UNPAID = "Unpaid"
    PAID = "Paid"
    OVERDUE = "Overdue"


BILL_STATUSES = (BillStatus.UNPAID, BillStatus.PAID, BillStatus.OVERDUE)


def _form_date(value, field: str) -> str | None:
    if is_blank(value):
        return None
    try:
        return parse_iso_date(value).isoformat()
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a YYYY-MM-DD date")


def create_bill(client: ResourceClient, data: dict) -> dict:
    """
    Create a bill from form input.

    When a purchase order is referenced, a missing vendor or amount is taken
    from that order. Raises ValidationError for missing vendor or bill
    number, a non-positive amount or a bill_date/due_date that is not
    YYYY-MM-DD.
    """
    purchase_order_id = None
    if not is_blank(data.get("purchase_order_id")):
        purchase_order_id = parse_id(data.get("purchase_order_id"), "purchase_order_id")

    vendor_id = data.get("vendor_id")
    amount = data.get("amount")
    if purchase_order_id is not None and (is_blank(vendor_id) or is_blank(amount) or amount == 0):
        order = client.get("purchase_orders", purchase_order_id)
        if order is None:
            raise ValidationError(f"Purchase order {purchase_order_id} not found")
        if is_blank(vendor_id):
            vendor_id = order.get("vendor_id")
        if is_blank(amount) or amount == 0:
            amount = order.get("total_amount")

    if is_blank(vendor_id):
        raise ValidationError("Please select a vendor")
    if is_blank(data.get("bill_number")):
        raise ValidationError("Please enter a bill number")

    status = data.get("status") or BillStatus.UNPAID
    if status not in BILL_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(BILL_STATUSES)}")

    bill_date = _form_date(data.get("bill_date"), "bill_date") or today_iso()
    due_date = _form_date(data.get("due_date"), "due_date")

    bill = compact({
        "bill_number": str(data["bill_number"]).strip(),
        "vendor_id": parse_id(vendor_id, "vendor_id"),
        "purchase_order_id": purchase_order_id,
        "bill_date": bill_date,
        "due_date": due_date,
        "amount": money(parse_amount(amount, "amount")),
        "status": status,
        "description": data.get("description"),
        "created_at": to_utc_z(utcnow()),
    })
    created = client.create("vendor_bills", bill)
    logger.info("Vendor bill %s created for vendor %s", bill["bill_number"], bill["vendor_id"])
    return created


def list_bills(client: ResourceClient, *, status: str | None = None, vendor_id=None,
               page: int = 1, page_size: int = 50):
    filters = {}
    if status:
        filters["status"] = eq(status)
    if vendor_id:
        filters["vendor_id"] = eq(vendor_id)
    return client.list("vendor_bills", filters=filters, order="bill_date.desc", page=page,
                       page_size=page_size, count=True)


def effective_status(bill: dict, today: date | None = None) -> str:
    """Unpaid bills past their due date read as Overdue. An unreadable due_date leaves the stored status."""
    status = bill.get("status") or BillStatus.UNPAID
    if status != BillStatus.UNPAID:
        return status
    due = try_parse_iso_date(bill.get("due_date"))
    today = today or utcnow().date()
    if due is not None and due < today:
        return BillStatus.OVERDUE
    return status


def mark_overdue(bills: list, today: date | None = None) -> list:
    """Copies of the bills with display status applied; nothing is written."""
    return [{**bill, "status": effective_status(bill, today)} for bill in bills]


def set_status(client: ResourceClient, bill_id, status: str) -> dict | None:
    if status not in BILL_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(BILL_STATUSES)}")
    return client.update("vendor_bills", bill_id, {"status": status})
