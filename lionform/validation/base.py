# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from typing_extensions import override

from .._errors import ValidationCancelled
from ..config import settings
from .result import ValidationContext, ValidationResult

__all__ = ("Validator", "MessageOverride", "display_name")

logger = logging.getLogger(__name__)


def display_name(field_id: str, context: ValidationContext | None) -> str:
    """Name used in failure messages: the field label when known."""
    return context.display_name if context is not None else field_id


class Validator(ABC):
    """Base class of every validator, primitive or composed.

    Subclasses implement :meth:`validate`. Callers (the controller and the
    combinators) go through ``await validator(value, field_id, context)``,
    which turns an exception raised by the validator into a failure result
    instead of letting it escape.
    """

    name: str = "Validator"

    @abstractmethod
    async def validate(
        self,
        value: Any,
        field_id: str,
        context: ValidationContext | None = None,
    ) -> ValidationResult:
        """Validate a value.

        Args:
            value: The value to validate.
            field_id: Id of the field the value belongs to.
            context: Snapshot of the whole form, for cross-field checks.

        Returns:
            ValidationResult describing the outcome.

        Raises:
            ValidationCancelled: If the validation was cancelled and its
                result must be discarded.
        """

    async def __call__(
        self,
        value: Any,
        field_id: str,
        context: ValidationContext | None = None,
    ) -> ValidationResult:
        try:
            result = await self.validate(value, field_id, context)
        except ValidationCancelled:
            raise
        except Exception:
            logger.exception(
                "Validator %s raised while validating field '%s'",
                self.name,
                field_id,
            )
            return ValidationResult.failure(
                settings.internal_error_message,
                details={"validator": self.name},
            )

        if not isinstance(result, ValidationResult):
            logger.error(
                "Validator %s returned %r instead of a ValidationResult",
                self.name,
                type(result).__name__,
            )
            return ValidationResult.failure(
                settings.internal_error_message,
                details={"validator": self.name},
            )
        return result

    def with_message(self, message: str) -> Validator:
        """Wrap this validator so that failures report ``message``."""
        return MessageOverride(self, message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class MessageOverride(Validator):

    def __init__(self, validator: Validator, message: str):
        self.validator = validator
        self.message = message
        self.name = validator.name

    @override
    async def validate(self, value, field_id, context=None):
        result = await self.validator(value, field_id, context)
        return result.with_message(self.message)
