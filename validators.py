"""Field validators for form input.

Each validator takes the raw field value and returns a FieldError, or None
when the value is acceptable. Invalid input is an expected outcome, so
nothing here raises.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return self.message


Validator = Callable[[str], "FieldError | None"]


def required(field: str) -> Validator:
    def validate(value: str) -> FieldError | None:
        if not value.strip():
            return FieldError(field, f"{field} is required")
        return None
    return validate


def positive_int(field: str) -> Validator:
    def validate(value: str) -> FieldError | None:
        trimmed = value.strip()
        if not trimmed:
            return FieldError(field, f"{field} is required")
        try:
            number = int(trimmed)
        except ValueError:
            return FieldError(field, f"{field} must be a number")
        if number <= 0:
            return FieldError(field, f"{field} must be a positive number")
        return None
    return validate


def positive_float(field: str) -> Validator:
    def validate(value: str) -> FieldError | None:
        trimmed = value.strip()
        if not trimmed:
            return FieldError(field, f"{field} is required")
        try:
            number = float(trimmed)
        except ValueError:
            return FieldError(field, f"{field} must be a number")
        # float() accepts "nan" and "inf"
        if not math.isfinite(number):
            return FieldError(field, f"{field} must be a number")
        if number <= 0:
            return FieldError(field, f"{field} must be a positive number")
        return None
    return validate


def min_length(field: str, length: int) -> Validator:
    def validate(value: str) -> FieldError | None:
        if len(value) < length:
            return FieldError(field, f"{field} must be at least {length} characters")
        return None
    return validate


def max_length(field: str, length: int) -> Validator:
    def validate(value: str) -> FieldError | None:
        if len(value) > length:
            return FieldError(field, f"{field} must not exceed {length} characters")
        return None
    return validate


def length_range(field: str, minimum: int, maximum: int) -> Validator:
    return chain(min_length(field, minimum), max_length(field, maximum))


def regex(field: str, pattern: str, message: str | None = None) -> Validator:
    compiled = re.compile(pattern)
    error_message = message or f"{field} has invalid format"

    def validate(value: str) -> FieldError | None:
        if not compiled.search(value):
            return FieldError(field, error_message)
        return None
    return validate


def email(field: str) -> Validator:
    return regex(
        field,
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
        f"{field} must be a valid email address",
    )


def numeric(field: str) -> Validator:
    return regex(field, r"^\d+$", f"{field} must contain only numbers")


def alphanumeric(field: str) -> Validator:
    return regex(field, r"^[a-zA-Z0-9]+$", f"{field} must contain only letters and numbers")


def chain(*validators: Validator) -> Validator:
    """Run validators left to right and return the first error."""
    def validate(value: str) -> FieldError | None:
        for validator in validators:
            if error := validator(value):
                return error
        return None
    return validate


def optional(validator: Validator) -> Validator:
    """Accept blank values, otherwise defer to the wrapped validator."""
    def validate(value: str) -> FieldError | None:
        if not value.strip():
            return None
        return validator(value)
    return validate
