# Overview: Accounts-payable ledger and trial balance derived from bills and payments.

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from .resource_client import ResourceClient, eq, in_
from ..time_utils import parse_iso_date, try_parse_iso_date
from ..validation import ValidationError, money, to_decimal
"""
Payables Ledger Invariants

- Read-only: built from vendor_bills (credit) and payments (debit); never written back.
- Balance is what we owe the vendor: opening + credits - debits.
- Date filtering is inclusive on both ends; entries before from_date roll
  into the opening balance.
- Entries on the same date list bills before payments.
"""


logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _bill_entry(bill: dict) -> dict:
    return {
        "date": try_parse_iso_date(bill.get("bill_date")) or try_parse_iso_date(bill.get("created_at")),
        "particulars": f"Purchase Bill {bill.get('bill_number') or bill.get('id')}",
        "voucher_no": bill.get("bill_number"),
        "debit": ZERO,
        "credit": to_decimal(bill.get("amount"), minimum=0),
        "kind": "bill",
    }


def _payment_entry(payment: dict, bill_numbers: dict) -> dict:
    bill_number = bill_numbers.get(payment.get("vendor_bill_id"))
    return {
        "date": try_parse_iso_date(payment.get("paid_at")),
        "particulars": f"Payment against {bill_number or 'bill ' + str(payment.get('vendor_bill_id'))}",
        "voucher_no": payment.get("reference") or f"PAY-{payment.get('id')}",
        "debit": to_decimal(payment.get("amount"), minimum=0),
        "credit": ZERO,
        "kind": "payment",
    }


def _payments_for(client: ResourceClient, bills: list) -> list:
    bill_ids = [b["id"] for b in bills if b.get("id") is not None]
    if not bill_ids:
        return []
    return client.list("payments", filters={"vendor_bill_id": in_(bill_ids)}).items


def vendor_ledger(client: ResourceClient, vendor_id, *, from_date=None, to_date=None) -> dict:
    """
    Ledger for one vendor with running balance between two dates.

    Raises ValidationError if from_date or to_date is not YYYY-MM-DD.
    """
    try:
        start = parse_iso_date(from_date)
        end = parse_iso_date(to_date)
    except ValueError:
        raise ValidationError("from/to must be YYYY-MM-DD dates")

    bills = client.list("vendor_bills", filters={"vendor_id": eq(vendor_id)}).items
    bill_numbers = {b.get("id"): b.get("bill_number") for b in bills}
    payments = _payments_for(client, bills)

    entries = [_bill_entry(b) for b in bills] + [_payment_entry(p, bill_numbers) for p in payments]
    undated = [e for e in entries if e["date"] is None]
    if undated:
        logger.warning(
            "Vendor %s ledger skips %d entr(ies) without a valid date: %s",
            vendor_id, len(undated), ", ".join(str(e["voucher_no"]) for e in undated),
        )
    entries = [e for e in entries if e["date"] is not None]
    entries.sort(key=lambda e: (e["date"], 0 if e["kind"] == "bill" else 1))

    opening = ZERO
    rows = []
    for entry in entries:
        if start and entry["date"] < start:
            opening += entry["credit"] - entry["debit"]
            continue
        if end and entry["date"] > end:
            continue
        rows.append(entry)

    balance = opening
    total_debit = ZERO
    total_credit = ZERO
    out = []
    for entry in rows:
        balance += entry["credit"] - entry["debit"]
        total_debit += entry["debit"]
        total_credit += entry["credit"]
        out.append({
            "date": entry["date"].isoformat(),
            "particulars": entry["particulars"],
            "voucher_no": entry["voucher_no"],
            "debit": money(entry["debit"]),
            "credit": money(entry["credit"]),
            "balance": money(balance),
        })

    return {
        "vendor_id": vendor_id,
        "from_date": start.isoformat() if start else None,
        "to_date": end.isoformat() if end else None,
        "opening": money(opening),
        "debit": money(total_debit),
        "credit": money(total_credit),
        "closing": money(balance),
        "entries": out,
    }


def trial_balance(client: ResourceClient) -> dict:
    """Per-vendor billed, paid and outstanding totals, plus grand totals."""
    vendors = client.list("vendors", order="name.asc").items
    bills = client.list("vendor_bills").items
    payments = client.list("payments").items

    vendor_of_bill = {b.get("id"): b.get("vendor_id") for b in bills}
    billed = defaultdict(lambda: ZERO)
    paid = defaultdict(lambda: ZERO)
    for bill in bills:
        billed[bill.get("vendor_id")] += to_decimal(bill.get("amount"), minimum=0)
    for payment in payments:
        vendor_id = vendor_of_bill.get(payment.get("vendor_bill_id"))
        if vendor_id is not None:
            paid[vendor_id] += to_decimal(payment.get("amount"), minimum=0)

    rows = []
    for vendor in vendors:
        vid = vendor.get("id")
        if not billed[vid] and not paid[vid]:
            continue
        rows.append({
            "vendor_id": vid,
            "vendor": vendor.get("name"),
            "billed": money(billed[vid]),
            "paid": money(paid[vid]),
            "outstanding": money(billed[vid] - paid[vid]),
        })

    total_billed = sum(billed.values(), ZERO)
    total_paid = sum(paid.values(), ZERO)
    return {
        "rows": rows,
        "billed": money(total_billed),
        "paid": money(total_paid),
        "outstanding": money(total_billed - total_paid),
    }
