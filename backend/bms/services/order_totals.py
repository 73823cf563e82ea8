# Overview: Purchase-order line normalization and subtotal/tax/total computation.

"""
Order Total Calculator

Pure functions; nothing here performs I/O or raises on bad numbers. Every
numeric input is normalized leniently (non-numeric -> 0) so a half-filled
order form always produces a total.

Line totals follow one formula everywhere:
    subtotal = quantity * unit_price
    tax      = subtotal * tax_percent / 100
    total    = subtotal + tax
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from ..validation import ValidationError, is_blank, money, to_decimal, to_int


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def compute_line_total(quantity, unit_price, tax_percent) -> Decimal:
    """
    Total for one line, tax included.

    quantity is coerced to an integer >= 1; unit_price and tax_percent to
    numbers >= 0.
    """
    qty = to_int(quantity, minimum=1, default=1)
    price = to_decimal(unit_price, minimum=0)
    pct = to_decimal(tax_percent, minimum=0)
    subtotal = qty * price
    return subtotal + subtotal * pct / HUNDRED


@dataclass(frozen=True)
class OrderLine:
    """
    A purchase-order line in one normalized shape.

    Forms and older records use either quantity/price or qty/unit_price;
    from_mapping() accepts both so nothing downstream has to look at field
    names again.
    """
    product_id: int | None
    quantity: Decimal
    unit_price: Decimal
    tax_percent: Decimal | None = None
    total: Decimal | None = None

    @classmethod
    def from_mapping(cls, data: Mapping) -> "OrderLine":
        quantity = data.get("quantity")
        if is_blank(quantity):
            quantity = data.get("qty")
        unit_price = data.get("unit_price")
        if is_blank(unit_price):
            unit_price = data.get("price")

        product_id = data.get("product_id")
        product_id = to_int(product_id) if not is_blank(product_id) else None
        if product_id is not None and product_id <= 0:
            product_id = None

        tax_percent = data.get("tax_percent")
        total = data.get("total")
        return cls(
            product_id=product_id,
            quantity=to_decimal(quantity, minimum=0),
            unit_price=to_decimal(unit_price, minimum=0),
            tax_percent=None if is_blank(tax_percent) else to_decimal(tax_percent, minimum=0),
            total=None if is_blank(total) or to_decimal(total) == 0 else to_decimal(total, minimum=0),
        )

    @property
    def is_valid(self) -> bool:
        return self.product_id is not None and self.quantity > 0

    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    def tax(self, default_tax_percent=ZERO) -> Decimal:
        pct = self.tax_percent if self.tax_percent is not None else to_decimal(default_tax_percent, minimum=0)
        return self.subtotal() * pct / HUNDRED

    @property
    def line_total(self) -> Decimal:
        """Precomputed total when the line carries one, else the formula."""
        if self.total is not None:
            return self.total
        return self.subtotal() + self.tax()

    def to_payload(self, purchase_order_id, line_number: int) -> dict:
        return {
            "purchase_order_id": purchase_order_id,
            "product_id": self.product_id,
            "quantity": int(self.quantity) if self.quantity == self.quantity.to_integral_value() else float(self.quantity),
            "unit_price": money(self.unit_price),
            "tax_percent": money(self.tax_percent or ZERO),
            "total": money(self.line_total),
            "line_number": line_number,
        }


def normalize_lines(lines: Iterable) -> list[OrderLine]:
    """
    OrderLine for every input line.

    Raises ValidationError when `lines` is not a list of objects; only the
    numbers inside a line are coerced leniently.
    """
    if lines is None:
        return []
    if isinstance(lines, (str, bytes, Mapping)) or not isinstance(lines, Iterable):
        raise ValidationError("lines must be a list of objects")
    normalized = []
    for line in lines:
        if isinstance(line, OrderLine):
            normalized.append(line)
        elif isinstance(line, Mapping):
            normalized.append(OrderLine.from_mapping(line))
        else:
            raise ValidationError("lines must be a list of objects")
    return normalized


def compute_order_totals(lines: Iterable, default_tax_percent=0) -> dict:
    """
    Subtotal, tax and total over a list of lines.

    Each line uses its own tax_percent, or `default_tax_percent` when it has
    none. An empty list gives all zeros.
    """
    subtotal = ZERO
    tax = ZERO
    for line in normalize_lines(lines):
        subtotal += line.subtotal()
        tax += line.tax(default_tax_percent)
    return {"subtotal": subtotal, "tax": tax, "total": subtotal + tax}


def sum_line_totals(lines: Iterable) -> Decimal:
    """Grand total honoring precomputed line totals (used for derived bills)."""
    return sum((line.line_total for line in normalize_lines(lines)), ZERO)
