# Overview: Vendor payments against bills; settles a bill once fully paid.

from __future__ import annotations

import logging
from decimal import Decimal

from .resource_client import ResourceClient, eq
from .vendor_bill_service import BillStatus, set_status
from ..time_utils import today_iso
from ..validation import ValidationError, compact, money, parse_amount, parse_id, to_decimal


logger = logging.getLogger(__name__)


def payments_for_bill(client: ResourceClient, bill_id) -> list:
    return client.find("payments", vendor_bill_id=bill_id)


def paid_amount(payments: list) -> Decimal:
    return sum((to_decimal(p.get("amount"), minimum=0) for p in payments), Decimal("0"))


def record_payment(client: ResourceClient, data: dict) -> dict:
    """
    Record a payment against a vendor bill.

    When payments reach the bill amount the bill is marked Paid.
    Raises ValidationError for a missing bill or non-positive amount.
    """
    bill_id = parse_id(data.get("vendor_bill_id"), "vendor_bill_id")
    amount = parse_amount(data.get("amount"), "amount")

    bill = client.get("vendor_bills", bill_id)
    if bill is None:
        raise ValidationError(f"Vendor bill {bill_id} not found")

    payment = client.create("payments", compact({
        "vendor_bill_id": bill_id,
        "amount": money(amount),
        "paid_at": data.get("paid_at") or today_iso(),
        "method": data.get("method"),
        "reference": data.get("reference"),
    }))
    logger.info("Payment of %s recorded against bill %s", money(amount), bill_id)

    if bill.get("status") != BillStatus.PAID:
        if paid_amount(payments_for_bill(client, bill_id)) >= to_decimal(bill.get("amount"), minimum=0):
            set_status(client, bill_id, BillStatus.PAID)
            logger.info("Vendor bill %s settled", bill_id)

    return payment


def list_payments(client: ResourceClient, *, vendor_bill_id=None, page: int = 1, page_size: int = 50):
    filters = {"vendor_bill_id": eq(vendor_bill_id)} if vendor_bill_id else None
    return client.list("payments", filters=filters, order="paid_at.desc", page=page,
                       page_size=page_size, count=True)
