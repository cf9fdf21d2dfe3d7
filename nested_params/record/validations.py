"""Field validators.

A validator is any callable taking the record and adding to
``record.errors``. Models list them in their ``validations`` class attribute.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from nested_params.nested.keys import is_blank

Validator = Callable[[Any], None]


def presence_of(*fields: str, message: str = "can't be blank") -> Validator:
    """Require each of *fields* to hold a non-blank value."""

    def validate(record: Any) -> None:
        for field in fields:
            if is_blank(record.read_attribute(field)):
                record.errors.add(field, message)

    return validate


def length_of(
    field: str,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
    allow_blank: bool = False,
) -> Validator:
    """Bound the length of a string field."""

    def validate(record: Any) -> None:
        value = record.read_attribute(field)
        if is_blank(value):
            if not allow_blank and minimum:
                record.errors.add(field, f"is too short (minimum is {minimum} characters)")
            return
        length = len(str(value))
        if minimum is not None and length < minimum:
            record.errors.add(field, f"is too short (minimum is {minimum} characters)")
        if maximum is not None and length > maximum:
            record.errors.add(field, f"is too long (maximum is {maximum} characters)")

    return validate
