"""Tests for validation utilities."""

from datetime import datetime, timezone

import pytest

from src.utils.validators import LanguageValidator, MonthKeyValidator


class TestMonthKeyValidator:
    """Tests for accounting period keys."""

    def test_bounds_are_half_open(self):
        start, end = MonthKeyValidator.bounds("2024-05")

        assert start == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 6, 1, tzinfo=timezone.utc)

    def test_december_rolls_into_next_year(self):
        start, end = MonthKeyValidator.bounds("2023-12")

        assert start == datetime(2023, 12, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("month", ["2024-00", "2024-13", "24-05", "2024/05", "", None])
    def test_invalid_keys(self, month):
        assert not MonthKeyValidator.is_valid(month)
        assert MonthKeyValidator.validate(month)[0].code == "INVALID_MONTH_KEY"
        with pytest.raises(ValueError):
            MonthKeyValidator.bounds(month)

    def test_previous_month(self):
        now = datetime(2024, 6, 3, tzinfo=timezone.utc)
        assert MonthKeyValidator.previous_month(now) == "2024-05"

    def test_previous_month_in_january(self):
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert MonthKeyValidator.previous_month(now) == "2023-12"


class TestLanguageValidator:
    """Tests for language code validation."""

    def test_valid_codes(self):
        assert LanguageValidator.is_valid_iso639_1("en")
        assert LanguageValidator.is_valid_iso639_1("hi-IN")
        assert LanguageValidator.validate(None) == []

    def test_invalid_codes(self):
        assert not LanguageValidator.is_valid_iso639_1("english")
        errors = LanguageValidator.validate("EN")
        assert errors[0].field == "language"
