"""Validation utilities for business rules and data formats."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class FieldError:
    """Validation error details for a single field."""
    field: str
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


@dataclass
class ValidationResult:
    """Result of validation operation."""
    is_valid: bool
    errors: List[FieldError]


class LanguageValidator:
    """Validator for language codes."""

    ISO_639_1_PATTERN = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")

    @classmethod
    def is_valid_iso639_1(cls, language: str) -> bool:
        """Check if language code is valid ISO 639-1 format."""
        if not language:
            return False
        return bool(cls.ISO_639_1_PATTERN.match(language))

    @classmethod
    def validate(cls, language: Optional[str]) -> List[FieldError]:
        """Validate language code."""
        errors = []

        if not language:
            return errors

        if not cls.is_valid_iso639_1(language):
            errors.append(FieldError(
                field="language",
                code="INVALID_LANGUAGE_FORMAT",
                message="Language must be valid ISO 639-1 code (e.g., 'en', 'hi-IN')",
                details={"provided": language}
            ))

        return errors


class MonthKeyValidator:
    """Validator and parser for accounting period keys (YYYY-MM)."""

    MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")

    @classmethod
    def is_valid(cls, month: Optional[str]) -> bool:
        if not month:
            return False
        return bool(cls.MONTH_KEY_PATTERN.match(month))

    @classmethod
    def validate(cls, month: Optional[str]) -> List[FieldError]:
        """Validate month key format."""
        if cls.is_valid(month):
            return []
        return [FieldError(
            field="month",
            code="INVALID_MONTH_KEY",
            message="Month must be in format YYYY-MM",
            details={"provided": month}
        )]

    @classmethod
    def bounds(cls, month: str) -> Tuple[datetime, datetime]:
        """
        Return the half-open UTC interval [start, end) covered by a month key.

        Raises ValueError for malformed keys.
        """
        match = cls.MONTH_KEY_PATTERN.match(month or "")
        if not match:
            raise ValueError(f"Invalid month key: {month!r}")

        year, month_number = int(match.group(1)), int(match.group(2))
        start = datetime(year, month_number, 1, tzinfo=timezone.utc)
        if month_number == 12:
            end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        else:
            end = datetime(year, month_number + 1, 1, tzinfo=timezone.utc)
        return start, end

    @classmethod
    def previous_month(cls, now: Optional[datetime] = None) -> str:
        """Month key of the last closed accounting period."""
        now = now or datetime.now(timezone.utc)
        if now.month == 1:
            return f"{now.year - 1}-12"
        return f"{now.year}-{now.month - 1:02d}"
