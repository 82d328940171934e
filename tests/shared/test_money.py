from decimal import Decimal

import pytest

from storefront.shared.money import from_minor_units, to_minor_units, to_money


class TestToMoney:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("2.345"), Decimal("2.35")),
            (Decimal("2.344"), Decimal("2.34")),
            ("10", Decimal("10.00")),
            (7, Decimal("7.00")),
            (0.1, Decimal("0.10")),
            (1.005, Decimal("1.01")),
        ],
    )
    def test_rounds_half_up_to_cents(self, value, expected):
        assert to_money(value) == expected

    def test_result_always_has_two_places(self):
        assert str(to_money(3)) == "3.00"


class TestMinorUnits:
    def test_to_cents(self):
        assert to_minor_units(Decimal("19.99")) == 1999

    def test_from_cents(self):
        assert from_minor_units(1999) == Decimal("19.99")

    def test_none_passes_through(self):
        assert to_minor_units(None) is None
        assert from_minor_units(None) is None
