"""
Validation utilities for the UAE Listings API.
Provides identifier parsing, query value coercion and Pydantic error conversion.
"""

import math
import uuid
from typing import Any, Dict, List, Optional
from pydantic import ValidationError as PydanticValidationError

from app.utils.exceptions import ValidationError, InvalidListingIdError


class ValidationUtils:
    """
    Utility class for common validation operations.
    Provides reusable validation methods for various data types.
    """

    # Stands in for a numeric query value that could not be parsed; matches nothing
    NO_MATCH = float("nan")

    @staticmethod
    def parse_listing_id(value: Any) -> uuid.UUID:
        """
        Parse a path identifier into the store's native id type.

        Args:
            value: Raw identifier from the request path

        Returns:
            Parsed UUID

        Raises:
            InvalidListingIdError: If the value is not a well-formed id
        """
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value).strip())
        except (ValueError, AttributeError, TypeError):
            raise InvalidListingIdError(value)

    @staticmethod
    def coerce_number(value: Optional[str]) -> Optional[float]:
        """
        Coerce a numeric query parameter without bounds checking.

        Empty or missing values mean "no filter" and return None. Values that
        are not numbers return ``NO_MATCH`` rather than raising.
        """
        if value is None:
            return None
        text = str(value).strip()
        if text == "":
            return None
        try:
            number = float(text)
        except ValueError:
            return ValidationUtils.NO_MATCH
        return number

    @staticmethod
    def is_no_match(value: Optional[float]) -> bool:
        return value is not None and math.isnan(value)

    @staticmethod
    def parse_flag(value: Optional[str]) -> Optional[bool]:
        """Only the literal string "true" is true; any other non-empty value is false."""
        if value is None or value == "":
            return None
        return value == "true"

    @staticmethod
    def blank_to_none(value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        return value


def describe_field_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten Pydantic error dicts into ``{field, message, type, input}`` entries."""
    return [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
            "input": error.get("input")
        }
        for error in errors
    ]


def handle_pydantic_validation_error(
    exc: PydanticValidationError,
    message: str = "Request validation failed"
) -> ValidationError:
    """
    Convert Pydantic validation error to custom ValidationError.

    Args:
        exc: Pydantic validation error
        message: Main error message

    Returns:
        Custom ValidationError instance
    """
    return ValidationError(
        detail=message,
        field_errors=describe_field_errors(exc.errors())
    )
