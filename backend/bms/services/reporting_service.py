# Overview: Dashboard and report summaries across vendors, products, orders, bills, payments.

from __future__ import annotations

from decimal import Decimal

from .order_totals import ZERO
from .resource_client import ResourceClient, eq
from .vendor_bill_service import BillStatus, mark_overdue
from ..validation import money, to_decimal


def _count(client: ResourceClient, resource: str, filters: dict | None = None) -> int:
    # One-row page with an exact count keeps the payload small
    return client.list(resource, filters=filters, limit=1, count=True).total


def dashboard_stats(client: ResourceClient) -> dict:
    bills = mark_overdue(client.list("vendor_bills").items)
    payments = client.list("payments").items

    outstanding = sum(
        (to_decimal(b.get("amount"), minimum=0) for b in bills if b["status"] != BillStatus.PAID),
        ZERO,
    )
    return {
        "vendors": _count(client, "vendors"),
        "products": _count(client, "products"),
        "purchase_orders": _count(client, "purchase_orders"),
        "draft_orders": _count(client, "purchase_orders", {"status": eq("Draft")}),
        "bills": len(bills),
        "overdue_bills": sum(1 for b in bills if b["status"] == BillStatus.OVERDUE),
        "outstanding_amount": money(outstanding),
        "payments_total": money(sum((to_decimal(p.get("amount"), minimum=0) for p in payments), Decimal("0"))),
    }


def purchase_report(client: ResourceClient, *, from_date=None, to_date=None) -> dict:
    """Order value per status and per vendor within an optional po_date range."""
    filters = {}
    if from_date and to_date:
        filters["and"] = f"(po_date.gte.{from_date},po_date.lte.{to_date})"
    elif from_date:
        filters["po_date"] = f"gte.{from_date}"
    elif to_date:
        filters["po_date"] = f"lte.{to_date}"
    orders = client.list("purchase_orders", filters=filters).items

    by_status: dict = {}
    by_vendor: dict = {}
    for order in orders:
        amount = to_decimal(order.get("total_amount"), minimum=0)
        status = order.get("status") or "Draft"
        by_status[status] = by_status.get(status, ZERO) + amount
        by_vendor[order.get("vendor_id")] = by_vendor.get(order.get("vendor_id"), ZERO) + amount

    return {
        "orders": len(orders),
        "by_status": {k: money(v) for k, v in by_status.items()},
        "by_vendor": [{"vendor_id": k, "amount": money(v)} for k, v in by_vendor.items()],
        "total": money(sum(by_status.values(), ZERO)),
    }
