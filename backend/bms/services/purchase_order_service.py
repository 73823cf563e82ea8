# Overview: Purchase-order workflow; creates an order, its lines, and a derived vendor bill.

"""
Purchase-Order Workflow

WHY: Creating a purchase order touches up to three collections in the data
store (purchase_orders, purchase_order_lines, vendor_bills). The store has
no multi-request transactions, so the workflow is an ordered, best-effort
sequence:

1. Validate and normalize locally (nothing is written on failure)
2. Create the order; the response must carry its id
3. Create lines one at a time, numbered 1..n in input order
4. If the order is Confirmed/Converted, derive an Unpaid vendor bill

INVARIANTS:
- At most one order is created per call
- Line N+1 is not submitted until line N has been accepted
- A failed line stops the loop; already-created records are NOT rolled back.
  WorkflowError carries the step, the line index and the created records so
  the caller can tell "nothing created" from "partially created"
- A failed bill derivation is logged and does not fail the workflow; a 401
  still propagates as AuthorizationError from every step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable

from .order_totals import OrderLine, compute_order_totals, normalize_lines, sum_line_totals
from .resource_client import AuthorizationError, ResourceClient, ResourceError, eq, gte, lte
from ..time_utils import millis_suffix, today_iso, utcnow, to_utc_z
from ..validation import ValidationError, compact, is_blank, money, parse_id


logger = logging.getLogger(__name__)


class POStatus:
    DRAFT = "Draft"
    CONFIRMED = "Confirmed"
    CONVERTED = "Converted"


PO_STATUSES = (POStatus.DRAFT, POStatus.CONFIRMED, POStatus.CONVERTED)

# Statuses that produce a vendor bill
BILLABLE_STATUSES = (POStatus.CONFIRMED, POStatus.CONVERTED)


class WorkflowError(Exception):
    """
    A create call failed mid-workflow.

    step is "create_order" or "create_line"; index is the 0-based position
    of the failing line. order/created_lines hold whatever was committed.
    """

    def __init__(self, message, *, step, index=None, order=None, created_lines=None, cause=None):
        super().__init__(message)
        self.step = step
        self.index = index
        self.order = order
        self.created_lines = list(created_lines or [])
        self.cause = cause

    @property
    def partial(self) -> bool:
        """True when an order record exists in the store despite the failure."""
        return self.order is not None

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "step": self.step,
            "index": self.index,
            "partial": self.partial,
            "order_id": self.order.get("id") if self.order else None,
            "created_lines": len(self.created_lines),
        }


class DerivationError(Exception):
    """Vendor-bill generation from a purchase order failed."""


@dataclass
class CreatedOrder:
    """
    Outcome of a successful workflow run.

    bill is the derived vendor bill, or None when the status is not billable
    or derivation failed (bill_error then holds the reason).
    """
    order: dict
    lines: list = field(default_factory=list)
    bill: dict | None = None
    bill_error: str | None = None

    @property
    def id(self):
        return self.order.get("id")


# =============================================================================
# PREPARATION
# =============================================================================

def generate_po_number() -> str:
    return f"PO{millis_suffix(6)}"


def prepare_order(form: dict) -> dict:
    """
    Order payload from form input.

    Fills po_number, reference, po_date and status when missing.
    Raises ValidationError if vendor_id is missing or status is unknown.
    """
    vendor_id = parse_id(form.get("vendor_id"), "vendor_id")

    status = form.get("status") or POStatus.DRAFT
    if status not in PO_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(PO_STATUSES)}")

    order = dict(form)
    order.update({
        "po_number": form.get("po_number") or generate_po_number(),
        "vendor_id": vendor_id,
        "po_date": form.get("po_date") or today_iso(),
        "reference": form.get("reference") or f"REQ-{millis_suffix(4)}",
        "status": status,
    })
    return order


def valid_lines(lines: Iterable) -> list[OrderLine]:
    """
    Normalized lines that have a product and a positive quantity.

    A client-supplied total is discarded; new lines always take the formula.
    """
    return [replace(line, total=None) for line in normalize_lines(lines) if line.is_valid]


# =============================================================================
# WORKFLOW
# =============================================================================

def create_purchase_order_with_lines(client: ResourceClient, order: dict, lines: Iterable) -> CreatedOrder:
    """
    Create an order, then its lines, then (when billable) a vendor bill.

    Returns a CreatedOrder with the order record, its lines and the derived
    bill (None if none was created).

    Raises:
        ValidationError: no valid lines or missing vendor (nothing written)
        WorkflowError: the order or a line create failed
        AuthorizationError: the store rejected the token (any step)
    """
    if is_blank(order.get("vendor_id")):
        raise ValidationError("vendor_id is required")

    surviving = valid_lines(lines)
    if not surviving:
        raise ValidationError("Add at least one line item with a product and quantity")

    status = order.get("status") or POStatus.DRAFT
    clean_order = compact({**order, "status": status})
    if "total_amount" not in clean_order:
        clean_order["total_amount"] = money(compute_order_totals(surviving)["total"])

    logger.info(
        "Creating purchase order %s for vendor %s with %d line(s)",
        clean_order.get("po_number"), clean_order.get("vendor_id"), len(surviving),
    )

    # Step 1: order
    try:
        created = client.create("purchase_orders", clean_order)
    except AuthorizationError:
        raise
    except ResourceError as e:
        raise WorkflowError(f"Purchase order creation failed: {e}", step="create_order", cause=e) from e
    if not created or created.get("id") is None:
        raise WorkflowError(
            "Purchase order creation failed - no valid order returned",
            step="create_order",
        )

    order_id = created["id"]
    logger.info("Purchase order created with id %s", order_id)

    # Step 2: lines, strictly in order
    created_lines = []
    for index, line in enumerate(surviving):
        try:
            created_lines.append(client.create("purchase_order_lines", line.to_payload(order_id, index + 1)))
        except AuthorizationError:
            raise
        except ResourceError as e:
            logger.error("Line %d of purchase order %s failed: %s", index + 1, order_id, e)
            raise WorkflowError(
                f"Failed to create line item {index + 1}: {e}",
                step="create_line",
                index=index,
                order=created,
                created_lines=created_lines,
                cause=e,
            ) from e

    logger.info("Created %d line(s) for purchase order %s", len(created_lines), order_id)

    result = CreatedOrder(order=created, lines=created_lines)

    # Step 3: derived bill, never fatal
    if status in BILLABLE_STATUSES:
        try:
            result.bill = generate_vendor_bill_from_po(client, created, surviving)
        except DerivationError as e:
            logger.exception("Vendor bill generation failed for purchase order %s", order_id)
            result.bill_error = str(e)

    return result


# =============================================================================
# VENDOR BILL DERIVATION
# =============================================================================

def generate_bill_number(purchase_order: dict) -> str:
    """
    BILL-<po_number or id>-<4 digits of the ms clock>.

    Not guaranteed unique: the suffix repeats every 10 seconds.
    """
    source = purchase_order.get("po_number") or purchase_order.get("id")
    return f"BILL-{source}-{millis_suffix(4)}"


def generate_vendor_bill_from_po(client: ResourceClient, purchase_order: dict, order_lines: Iterable) -> dict:
    """
    Create an Unpaid vendor bill for a purchase order.

    The amount is the sum of line totals (precomputed totals win over the
    quantity * price * (1 + tax/100) formula). Raises DerivationError if the
    create call fails, AuthorizationError if the store rejects the token.
    """
    total_amount = sum_line_totals(order_lines)
    reference = purchase_order.get("po_number") or purchase_order.get("id")

    bill = compact({
        "bill_number": generate_bill_number(purchase_order),
        "vendor_id": purchase_order.get("vendor_id"),
        "purchase_order_id": purchase_order.get("id"),
        "bill_date": today_iso(),
        "amount": money(total_amount),
        "status": "Unpaid",
        "description": f"Bill generated from Purchase Order {reference}",
        "created_at": to_utc_z(utcnow()),
    })

    try:
        created = client.create("vendor_bills", bill)
    except AuthorizationError:
        raise
    except ResourceError as e:
        raise DerivationError(f"Failed to generate vendor bill: {e}") from e

    logger.info("Vendor bill %s generated from purchase order %s", bill["bill_number"], purchase_order.get("id"))
    return created


# =============================================================================
# QUERIES AND STATUS CHANGES
# =============================================================================

def list_purchase_orders(
    client: ResourceClient,
    *,
    page: int = 1,
    page_size: int = 10,
    status: str | None = None,
    vendor_id=None,
    from_date: str | None = None,
    to_date: str | None = None,
    sort: str = "created_at.desc",
):
    """Server-side filtered, paginated order list. Returns ListResult."""
    filters = {}
    if status:
        filters["status"] = eq(status)
    if vendor_id:
        filters["vendor_id"] = eq(vendor_id)
    if from_date and to_date:
        filters["and"] = f"(created_at.gte.{from_date},created_at.lte.{to_date})"
    elif from_date:
        filters["created_at"] = gte(from_date)
    elif to_date:
        filters["created_at"] = lte(to_date)

    return client.list(
        "purchase_orders",
        filters=filters,
        order=sort,
        page=page,
        page_size=page_size,
        count=True,
    )


def get_order_lines(client: ResourceClient, order_id) -> list:
    return client.list(
        "purchase_order_lines",
        filters={"purchase_order_id": eq(order_id)},
        order="line_number.asc",
    ).items


def get_purchase_order(client: ResourceClient, order_id) -> dict | None:
    """Order record with its lines under "lines", or None."""
    order = client.get("purchase_orders", order_id)
    if order is None:
        return None
    return {**order, "lines": get_order_lines(client, order_id)}


def update_status(client: ResourceClient, order_id, status: str) -> dict:
    """
    Change an order's status.

    Moving to Confirmed/Converted derives a vendor bill unless the order
    already has one. Derivation failure is logged, not raised.
    """
    if status not in PO_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(PO_STATUSES)}")

    order = client.update("purchase_orders", order_id, {"status": status})
    if order is None:
        raise ValidationError(f"Purchase order {order_id} not found")

    if status in BILLABLE_STATUSES:
        existing = client.find("vendor_bills", purchase_order_id=order_id)
        if not existing:
            try:
                generate_vendor_bill_from_po(client, order, get_order_lines(client, order_id))
            except DerivationError:
                logger.exception("Vendor bill generation failed for purchase order %s", order_id)
    return order


def order_summary(order: dict, lines: Iterable) -> dict:
    """Totals block for an order detail view."""
    totals = compute_order_totals(lines)
    return {key: money(value) for key, value in totals.items()} | {"total_amount": order.get("total_amount")}
