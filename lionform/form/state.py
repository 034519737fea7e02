# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models.field import FormFieldConfig
from ..validation.base import Validator
from ..validation.result import CancelSignal

__all__ = ("FormStatus", "FieldState")


class FormStatus(str, Enum):
    """Lifecycle of a form.

    Attributes:
        CLEAN: No value changed since creation or the last reset.
        DIRTY: At least one value was changed.
        VALIDATING: ``submit`` is validating every visible field.
        SUBMITTING: Validation passed and the submission callback runs.
        SUCCEEDED: The last submission succeeded.
        FAILED: The last submission failed validation or was rejected.
    """

    CLEAN = "clean"
    DIRTY = "dirty"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class FieldState:
    """Mutable per-field record owned by a FormController.

    ``validation_generation`` increases on every value change; a validation
    result is only written back if the generation it started with is still
    current.
    """

    config: FormFieldConfig
    value: Any = None
    error: str | None = None
    is_validating: bool = False
    is_touched: bool = False
    validation_generation: int = 0
    validator: Validator | None = field(default=None, repr=False)
    signal: CancelSignal | None = field(
        default=None, repr=False, compare=False
    )
    pending_validations: int = field(default=0, repr=False, compare=False)

    @classmethod
    def create(
        cls, config: FormFieldConfig, validator: Validator | None = None
    ) -> FieldState:
        return cls(
            config=config, value=config.initial_value, validator=validator
        )

    @property
    def field_id(self) -> str:
        return self.config.id

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def touch(self) -> None:
        self.is_touched = True

    def begin_validation(self) -> CancelSignal:
        """Join the live validation run of the current value, or start one.

        Overlapping validations of one value share a signal, so a value
        change cancels all of them.
        """
        if self.signal is None or self.signal.is_cancelled:
            self.signal = CancelSignal()
            self.pending_validations = 0
        self.pending_validations += 1
        self.is_validating = True
        return self.signal

    def end_validation(self, signal: CancelSignal) -> None:
        """Leave a run; its signal is dropped when the last validation ends."""
        if self.signal is not signal:
            return
        self.pending_validations -= 1
        if self.pending_validations <= 0:
            self.signal = None
            self.pending_validations = 0
            self.is_validating = False

    def cancel_validation(self) -> None:
        if self.signal is not None:
            self.signal.cancel()
            self.signal = None
        self.pending_validations = 0
        self.is_validating = False

    def reset(self) -> None:
        """Back to the initial value; in-flight validations become stale."""
        self.cancel_validation()
        self.value = self.config.initial_value
        self.error = None
        self.is_touched = False
        self.validation_generation += 1

    def snapshot(self) -> FieldState:
        """Detached copy for callers; mutating it never affects the form."""
        return dataclasses.replace(self, signal=None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.field_id,
            "value": self.value,
            "error": self.error,
            "isValid": self.is_valid,
            "isValidating": self.is_validating,
            "isTouched": self.is_touched,
        }
