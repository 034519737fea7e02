# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Built-in field validators.

Apart from :class:`RequiredValidator` and :class:`MatchValidator`, every
primitive treats a missing value (``None`` or an empty string) as nothing to
check and succeeds, so optional fields can carry format validators. Pair a
primitive with ``RequiredValidator`` to reject empty input.
"""

from __future__ import annotations

import math
import operator
import re
from collections.abc import Callable, Iterable, Sized
from typing import Any

from .base import Validator, display_name
from .result import ValidationContext, ValidationResult

__all__ = (
    "RequiredValidator",
    "EmailValidator",
    "UrlValidator",
    "PhoneValidator",
    "LengthValidator",
    "PatternValidator",
    "NumericValidator",
    "EnumValidator",
    "MatchValidator",
    "GreaterThanValidator",
    "LessThanValidator",
    "to_number",
)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
URL_PATTERN = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)
PHONE_PATTERN = re.compile(r"^[\d\s\-+()]{7,}$")
NUMBER_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII
)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def to_number(value: Any) -> int | float | None:
    """Parse ``value`` into a number, or return None when it is not one.

    Booleans and NaN are rejected. Strings must be plain ASCII decimals
    (optionally signed, with an exponent); digit separators are refused.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    if text.lstrip("+-").isdigit():
        return int(text)
    return float(text)


class RequiredValidator(Validator):
    """Fails on None, blank strings and empty collections."""

    name = "required"

    async def validate(self, value, field_id, context=None):
        if value is None:
            empty = True
        elif isinstance(value, str):
            empty = not value.strip()
        elif isinstance(value, (list, tuple, set, frozenset, dict)):
            empty = len(value) == 0
        else:
            empty = False

        if empty:
            return ValidationResult.failure(
                f"{display_name(field_id, context)} is required"
            )
        return ValidationResult.success()


class _RegexValidator(Validator):

    pattern: re.Pattern[str]
    message: str

    async def validate(self, value, field_id, context=None):
        if _is_missing(value):
            return ValidationResult.success()
        if not self.pattern.search(self._prepare(value)):
            return ValidationResult.failure(self.message)
        return ValidationResult.success()

    def _prepare(self, value: Any) -> str:
        return str(value).strip()


class EmailValidator(_RegexValidator):
    name = "email"
    pattern = EMAIL_PATTERN
    message = "Please enter a valid email address"


class UrlValidator(_RegexValidator):
    name = "url"
    pattern = URL_PATTERN
    message = "Please enter a valid URL"


class PhoneValidator(_RegexValidator):
    """Loose international phone check: 7+ digits, spaces, ``-+()``."""

    name = "phone"
    pattern = PHONE_PATTERN
    message = "Please enter a valid phone number"

    def _prepare(self, value: Any) -> str:
        return str(value).replace(" ", "")


class LengthValidator(Validator):
    """Checks ``min_length <= len(value) <= max_length`` (inclusive)."""

    name = "length"

    def __init__(
        self, min_length: int | None = None, max_length: int | None = None
    ):
        if min_length is None and max_length is None:
            raise ValueError(
                "At least one of min_length or max_length must be specified"
            )
        if (
            min_length is not None
            and max_length is not None
            and min_length > max_length
        ):
            raise ValueError("min_length cannot exceed max_length")
        self.min_length = min_length
        self.max_length = max_length

    async def validate(self, value, field_id, context=None):
        if _is_missing(value):
            return ValidationResult.success()

        length = (
            len(value)
            if isinstance(value, Sized) and not isinstance(value, (bytes,))
            else len(str(value))
        )
        name = display_name(field_id, context)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.failure(
                f"{name} must be at least {self.min_length} characters",
                details={"length": length, "min_length": self.min_length},
            )
        if self.max_length is not None and length > self.max_length:
            return ValidationResult.failure(
                f"{name} must be at most {self.max_length} characters",
                details={"length": length, "max_length": self.max_length},
            )
        return ValidationResult.success()


class PatternValidator(Validator):

    name = "pattern"

    def __init__(
        self,
        pattern: str | re.Pattern[str],
        message: str | None = None,
    ):
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid pattern {pattern!r}: {e}") from e
        self.pattern = pattern
        self.message = message

    async def validate(self, value, field_id, context=None):
        if _is_missing(value):
            return ValidationResult.success()
        if not self.pattern.search(str(value)):
            return ValidationResult.failure(
                self.message
                or f"{display_name(field_id, context)} format is invalid",
                details={"pattern": self.pattern.pattern},
            )
        return ValidationResult.success()


class NumericValidator(Validator):
    """Parses the value as a number and checks the optional inclusive range."""

    name = "numeric"

    def __init__(
        self,
        min_value: int | float | None = None,
        max_value: int | float | None = None,
    ):
        if (
            min_value is not None
            and max_value is not None
            and min_value > max_value
        ):
            raise ValueError("min_value cannot exceed max_value")
        self.min_value = min_value
        self.max_value = max_value

    async def validate(self, value, field_id, context=None):
        if _is_missing(value):
            return ValidationResult.success()

        name = display_name(field_id, context)
        number = to_number(value)
        if number is None:
            return ValidationResult.failure(
                f"{name} must be a valid number", details={"value": value}
            )
        if self.min_value is not None and number < self.min_value:
            return ValidationResult.failure(
                f"{name} must be at least {self.min_value}",
                details={"value": number, "min_value": self.min_value},
            )
        if self.max_value is not None and number > self.max_value:
            return ValidationResult.failure(
                f"{name} must be at most {self.max_value}",
                details={"value": number, "max_value": self.max_value},
            )
        return ValidationResult.success()


class EnumValidator(Validator):
    """Value (or every item of a multi-choice value) must be allowed."""

    name = "enum"

    def __init__(self, allowed_values: Iterable[Any]):
        self.allowed_values = list(allowed_values)

    async def validate(self, value, field_id, context=None):
        if _is_missing(value):
            return ValidationResult.success()

        if isinstance(value, (list, tuple, set, frozenset)):
            items = value
        else:
            items = [value]
        invalid = [i for i in items if i not in self.allowed_values]
        if invalid:
            return ValidationResult.failure(
                f"{display_name(field_id, context)} must be one of the "
                "allowed values",
                details={
                    "allowed_values": list(self.allowed_values),
                    "invalid": invalid,
                },
            )
        return ValidationResult.success()


class MatchValidator(Validator):
    """Value must equal another field's value at validation start."""

    name = "match"

    def __init__(self, other_field: str):
        self.other_field = other_field

    async def validate(self, value, field_id, context=None):
        other = context.get_value(self.other_field) if context else None
        if value != other:
            return ValidationResult.failure(
                f"{display_name(field_id, context)} must match "
                f"{self.other_field}",
                details={"other_field": self.other_field},
            )
        return ValidationResult.success()


class _ComparisonValidator(Validator):

    op: Callable[[Any, Any], bool]
    relation: str

    def __init__(
        self,
        bound: int | float | None = None,
        *,
        other_field: str | None = None,
    ):
        if (bound is None) == (other_field is None):
            raise ValueError("Exactly one of bound or other_field is required")
        if bound is not None and to_number(bound) is None:
            raise ValueError(f"Comparison bound must be a number: {bound!r}")
        self.bound = to_number(bound) if bound is not None else None
        self.other_field = other_field

    def _resolve_bound(
        self, context: ValidationContext | None
    ) -> int | float | None:
        if self.other_field is None:
            return self.bound
        if context is None:
            return None
        return to_number(context.get_value(self.other_field))

    async def validate(self, value, field_id, context=None):
        if _is_missing(value):
            return ValidationResult.success()

        bound = self._resolve_bound(context)
        if bound is None:
            # nothing to compare against yet
            return ValidationResult.success()

        number = to_number(value)
        if number is None or not self.op(number, bound):
            target = self.other_field if self.other_field else bound
            return ValidationResult.failure(
                f"{display_name(field_id, context)} must be "
                f"{self.relation} {target}",
                details={"value": value, "bound": bound},
            )
        return ValidationResult.success()


class GreaterThanValidator(_ComparisonValidator):
    name = "greaterthan"
    op = staticmethod(operator.gt)
    relation = "greater than"


class LessThanValidator(_ComparisonValidator):
    name = "lessthan"
    op = staticmethod(operator.lt)
    relation = "less than"
