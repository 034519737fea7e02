# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "FormError",
    "FormDefinitionError",
    "DuplicateFieldError",
    "DuplicateFieldIdError",
    "UnknownValidatorError",
    "ValidatorConfigError",
    "InvalidDeclarationError",
    "ValidationCancelled",
)


class FormError(Exception):
    default_message: ClassVar[str] = "Form error"
    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__ if hasattr(self, "__cause__") else None


class FormDefinitionError(FormError):
    """Raised while building a form definition or controller.

    These indicate a configuration mistake by the integrating developer and
    are the only errors allowed to escape form construction.
    """

    default_message = "Invalid form definition"
    __slots__ = ()


class DuplicateFieldError(FormDefinitionError):
    """A field id was registered twice within one form."""

    default_message = "Field already registered"
    __slots__ = ()

    def __init__(self, field_id: str, *, form_id: str | None = None):
        where = f" in form '{form_id}'" if form_id else ""
        super().__init__(
            f"Field '{field_id}' is already registered{where}",
            details={
                "field_id": field_id,
                **({"form_id": form_id} if form_id else {}),
            },
        )

    @property
    def field_id(self) -> str:
        return self.details["field_id"]


class DuplicateFieldIdError(FormDefinitionError):
    """Two forms being merged both define the same field id."""

    default_message = "Duplicate field id across forms"
    __slots__ = ()

    def __init__(self, field_id: str, form_ids: list[str]):
        super().__init__(
            f"Field id '{field_id}' is defined by more than one form: "
            f"{', '.join(form_ids)}",
            details={"field_id": field_id, "form_ids": list(form_ids)},
        )

    @property
    def field_id(self) -> str:
        return self.details["field_id"]

    @property
    def form_ids(self) -> list[str]:
        return self.details["form_ids"]


class UnknownValidatorError(FormDefinitionError):
    default_message = "Unknown validator"
    __slots__ = ()

    def __init__(self, field_id: str, validator_name: str):
        super().__init__(
            f"Unknown validator '{validator_name}' on field '{field_id}'",
            details={"field_id": field_id, "validator_name": validator_name},
        )

    @property
    def field_id(self) -> str:
        return self.details["field_id"]

    @property
    def validator_name(self) -> str:
        return self.details["validator_name"]


class ValidatorConfigError(FormDefinitionError):
    """A known validator was referenced without the parameters it needs."""

    default_message = "Invalid validator configuration"
    __slots__ = ()

    def __init__(
        self,
        validator_name: str,
        field_id: str,
        reason: str,
        *,
        cause: Exception | None = None,
    ):
        super().__init__(
            f"Cannot build validator '{validator_name}' for field "
            f"'{field_id}': {reason}",
            details={"field_id": field_id, "validator_name": validator_name},
            cause=cause,
        )


class InvalidDeclarationError(FormDefinitionError):
    default_message = "Malformed form declaration"
    __slots__ = ()


class ValidationCancelled(FormError):
    """Signals that an in-flight validation was cancelled.

    The result of a cancelled validation is discarded, the same way a stale
    result is.
    """

    default_message = "Validation cancelled"
    __slots__ = ()
