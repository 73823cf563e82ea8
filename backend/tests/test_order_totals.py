"""
Order total calculator tests.
"""

from decimal import Decimal

import pytest

from bms.services.order_totals import (
    OrderLine,
    compute_line_total,
    compute_order_totals,
    normalize_lines,
    sum_line_totals,
)
from bms.validation import ValidationError


class TestLineTotal:

    def test_subtotal_plus_tax(self):
        assert compute_line_total(2, 100, 10) == 220

    def test_same_inputs_same_output(self):
        assert compute_line_total(3, "19.99", 5) == compute_line_total(3, "19.99", 5)

    def test_quantity_floor_is_one(self):
        assert compute_line_total(0, 50, 0) == 50
        assert compute_line_total(-4, 50, 0) == 50

    def test_non_numeric_inputs_never_raise(self):
        assert compute_line_total("abc", "xyz", None) == 0
        assert compute_line_total(2, 10, "n/a") == 20

    def test_negative_price_and_tax_clamped(self):
        assert compute_line_total(2, -10, -5) == 0
        assert compute_line_total(1, 100, -5) == 100

    def test_string_numbers(self):
        assert compute_line_total("2", "100", "10") == Decimal("220")


class TestOrderTotals:

    def test_empty(self):
        assert compute_order_totals([]) == {"subtotal": 0, "tax": 0, "total": 0}

    def test_mixed_tax_rates(self):
        totals = compute_order_totals([
            {"quantity": 1, "unit_price": 50, "tax_percent": 0},
            {"quantity": 3, "unit_price": 10, "tax_percent": 20},
        ])
        assert totals == {"subtotal": 80, "tax": 6, "total": 86}

    def test_default_tax_applies_to_lines_without_one(self):
        totals = compute_order_totals(
            [{"quantity": 1, "unit_price": 100}, {"quantity": 1, "unit_price": 100, "tax_percent": 0}],
            default_tax_percent=10,
        )
        assert totals == {"subtotal": 200, "tax": 10, "total": 210}

    def test_order_of_lines_does_not_matter(self):
        lines = [
            {"quantity": 2, "unit_price": "12.50", "tax_percent": 18},
            {"quantity": 7, "unit_price": "3.10", "tax_percent": 5},
            {"quantity": 1, "unit_price": 999, "tax_percent": 28},
        ]
        assert compute_order_totals(lines) == compute_order_totals(list(reversed(lines)))

    def test_none_is_empty(self):
        assert compute_order_totals(None)["total"] == 0

    @pytest.mark.parametrize("lines", ["abc", b"abc", 5, [1, 2], {"qty": 1}, [{"qty": 1}, "x"]])
    def test_lines_must_be_objects(self, lines):
        with pytest.raises(ValidationError):
            normalize_lines(lines)


class TestOrderLine:

    @pytest.mark.parametrize("data", [
        {"product_id": 4, "quantity": 3, "price": 10, "tax_percent": 20},
        {"product_id": "4", "qty": "3", "unit_price": "10", "tax_percent": "20"},
    ])
    def test_both_field_conventions_normalize_identically(self, data):
        line = OrderLine.from_mapping(data)
        assert line.product_id == 4
        assert line.quantity == 3
        assert line.unit_price == 10
        assert line.line_total == 36

    def test_precomputed_total_wins(self):
        line = OrderLine.from_mapping({"product_id": 1, "qty": 1, "unit_price": 10, "total": 99})
        assert line.line_total == 99

    def test_zero_total_falls_back_to_formula(self):
        line = OrderLine.from_mapping({"product_id": 1, "qty": 2, "unit_price": 10, "total": 0})
        assert line.line_total == 20

    def test_validity(self):
        assert OrderLine.from_mapping({"product_id": 1, "qty": 1}).is_valid
        assert not OrderLine.from_mapping({"product_id": "", "qty": 1}).is_valid
        assert not OrderLine.from_mapping({"product_id": 1, "qty": 0}).is_valid

    def test_payload_numbering(self):
        payload = OrderLine.from_mapping({"product_id": 2, "qty": 2, "unit_price": 100, "tax_percent": 10}).to_payload(7, 3)
        assert payload == {
            "purchase_order_id": 7,
            "product_id": 2,
            "quantity": 2,
            "unit_price": 100.0,
            "tax_percent": 10.0,
            "total": 220.0,
            "line_number": 3,
        }

    def test_sum_line_totals_mixes_shapes(self):
        lines = [
            {"product_id": 1, "total": 50},
            {"product_id": 2, "quantity": 2, "price": 10, "tax_percent": 10},
            {"product_id": 3, "qty": 1, "unit_price": 5},
        ]
        assert sum_line_totals(lines) == Decimal("77")
