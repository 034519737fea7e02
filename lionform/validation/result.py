# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import anyio

from .._errors import ValidationCancelled

__all__ = ("ValidationResult", "ValidationContext", "CancelSignal")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of one validator invocation. Never mutated once created."""

    is_valid: bool
    error_message: str | None = None
    details: Mapping[str, Any] | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def failure(
        cls, message: str, *, details: Mapping[str, Any] | None = None
    ) -> ValidationResult:
        return cls(is_valid=False, error_message=message, details=details)

    def with_message(self, message: str) -> ValidationResult:
        """Same outcome with a replaced error message (failures only)."""
        if self.is_valid:
            return self
        return ValidationResult(False, message, self.details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errorMessage": self.error_message,
            "details": dict(self.details) if self.details else None,
        }

    def __str__(self) -> str:
        if self.is_valid:
            return "ValidationResult(valid)"
        return f"ValidationResult(invalid: {self.error_message})"


class CancelSignal:
    """Cooperative cancellation flag handed to async validators.

    The controller cancels a field's signal as soon as the field's value
    changes, so long-running validators can stop early. Validators either
    poll ``is_cancelled``/``raise_if_cancelled()`` or ``await wait()``.
    """

    __slots__ = ("_cancelled", "_event")

    def __init__(self) -> None:
        self._cancelled = False
        self._event: anyio.Event | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise ValidationCancelled()

    async def wait(self) -> None:
        """Block until the signal is cancelled."""
        if self._cancelled:
            return
        if self._event is None:
            # anyio events must be created inside a running event loop
            self._event = anyio.Event()
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancelSignal(cancelled={self._cancelled})"


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Read-only view of the form handed to validators.

    ``values`` is a snapshot taken when the field's validation started, so
    later edits never leak into a validation already in flight.
    """

    field_id: str
    values: Mapping[str, Any] = field(default_factory=dict)
    label: str | None = None
    signal: CancelSignal | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(
                self, "values", MappingProxyType(dict(self.values))
            )

    @property
    def display_name(self) -> str:
        return self.label or self.field_id

    @property
    def is_cancelled(self) -> bool:
        return self.signal is not None and self.signal.is_cancelled

    def get_value(self, field_id: str, default: Any = None) -> Any:
        return self.values.get(field_id, default)

    def has_value(self, field_id: str) -> bool:
        return self.values.get(field_id) is not None
