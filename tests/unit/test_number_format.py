"""
Unit tests for payload number/date parsing.
"""

import pytest
from datetime import date
from decimal import Decimal
from retailflow.utils.number_format import parse_money, parse_optional_money, parse_int, parse_date


class TestParseMoney:

    def test_float_keeps_two_decimals(self):
        assert parse_money(0.1) == Decimal('0.10')
        assert parse_money('19.999') == Decimal('20.00')

    def test_missing_value(self):
        with pytest.raises(ValueError, match='price is required'):
            parse_money(None, 'price')

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match='non-negative'):
            parse_money(-1, 'cost')

    def test_not_a_number(self):
        with pytest.raises(ValueError, match='must be a number'):
            parse_money('abc', 'cost')

    def test_optional_default(self):
        assert parse_optional_money('', 'discount', default=Decimal('0.00')) == Decimal('0.00')


class TestParseInt:

    def test_integral_values(self):
        assert parse_int('4') == 4
        assert parse_int(4.0) == 4

    def test_fraction_rejected(self):
        with pytest.raises(ValueError, match='whole number'):
            parse_int(1.5)

    def test_minimum(self):
        with pytest.raises(ValueError, match='at least 1'):
            parse_int(0, 'quantity', minimum=1)

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            parse_int(True)


class TestParseDate:

    def test_iso_date_and_datetime(self):
        assert parse_date('2024-03-05') == date(2024, 3, 5)
        assert parse_date('2024-03-05T10:30:00Z') == date(2024, 3, 5)

    def test_default(self):
        assert parse_date(None, default=date(2024, 1, 1)) == date(2024, 1, 1)

    def test_invalid(self):
        with pytest.raises(ValueError, match='YYYY-MM-DD'):
            parse_date('05/03/2024', 'dueDate')
