"""
Tests for boundary validation of quantities, dates and analytics ranges.
"""

from datetime import date, datetime

import pytest

from perishable_kernel.domain.validation import (
    MAX_QUANTITY,
    parse_analytics_range,
    parse_date,
    parse_quantity,
    parse_transaction,
    require_positive_quantity,
)
from perishable_kernel.exceptions import ValidationError


class TestParseQuantity:
    """Quantity must be a non-negative whole number."""

    @pytest.mark.parametrize("raw,expected", [
        (10, 10),
        (0, 0),
        ("15", 15),
        (" 7 ", 7),
    ])
    def test_accepts_integers_and_integer_strings(self, raw, expected):
        assert parse_quantity(raw) == expected

    @pytest.mark.parametrize("raw", [1.5, "1.5", "ten", None, True, [], "1e3"])
    def test_rejects_non_integers(self, raw):
        with pytest.raises(ValidationError, match="not an integer") as exc_info:
            parse_quantity(raw)

        assert exc_info.value.field == "quantity"
        assert exc_info.value.code == "VALIDATION_ERROR"

    @pytest.mark.parametrize("raw", [-1, "-3"])
    def test_rejects_negative(self, raw):
        with pytest.raises(ValidationError, match="should be positive"):
            parse_quantity(raw)

    def test_accepts_largest_storable_quantity(self):
        assert parse_quantity(str(MAX_QUANTITY)) == 2**63 - 1

    @pytest.mark.parametrize("raw", [2**63, str(2**63), 10**30])
    def test_rejects_quantity_beyond_column_range(self, raw):
        with pytest.raises(ValidationError, match="exceeds the maximum") as exc_info:
            parse_quantity(raw)

        assert exc_info.value.field == "quantity"

    def test_kernel_guard_rejects_zero(self):
        with pytest.raises(ValidationError, match="should be positive"):
            require_positive_quantity(0)

    def test_kernel_guard_accepts_positive(self):
        assert require_positive_quantity(3) == 3


class TestParseDate:
    """Dates are YYYY-MM-DD strings naming a real calendar day."""

    def test_parses_iso_string(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    def test_passes_dates_through(self):
        assert parse_date(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_truncates_datetimes(self):
        assert parse_date(datetime(2024, 1, 1, 15, 30)) == date(2024, 1, 1)

    @pytest.mark.parametrize("raw", ["2024/01/01", "24-01-01", "2024-1-1", "", "2024-01-01T00:00", 20240101])
    def test_rejects_wrong_format(self, raw):
        with pytest.raises(ValidationError, match="valid format YYYY-MM-DD"):
            parse_date(raw)

    @pytest.mark.parametrize("raw", ["2023-02-29", "2024-13-01", "2024-00-10", "2024-04-31"])
    def test_rejects_impossible_calendar_dates(self, raw):
        with pytest.raises(ValidationError, match="not numerically valid"):
            parse_date(raw)


class TestParseRequests:
    """Composite request validation."""

    def test_parse_transaction(self):
        assert parse_transaction("10", "2024-01-01") == (10, date(2024, 1, 1))

    def test_parse_analytics_range(self):
        assert parse_analytics_range("2024-01-01", "2024-01-31") == (
            date(2024, 1, 1),
            date(2024, 1, 31),
        )

    def test_single_day_range_is_valid(self):
        start, end = parse_analytics_range("2024-01-01", "2024-01-01")
        assert start == end

    def test_inverted_range_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_analytics_range("2024-02-01", "2024-01-01")

        assert exc_info.value.field == "start_date"

    def test_bad_end_date_names_the_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_analytics_range("2024-01-01", "soon")

        assert exc_info.value.field == "end_date"
