# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""
FormController: owns the mutable state of one live form.

The controller tracks values, runs validation (on demand or live, as values
change), aggregates errors and orchestrates submission. Hosts observe it with
:meth:`FormController.on_change` and read its snapshots.

Live validation needs a running controller::

    async with FormController("signup", live_validation=True) as form:
        form.register_field(
            email_config, [RequiredValidator(), EmailValidator()]
        )
        form.set_field_value("email", "a@b.co")  # validated in the background
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any

import anyio
from typing_extensions import Self

from .._errors import DuplicateFieldError, ValidationCancelled
from ..config import FormSettings
from ..config import settings as default_settings
from ..ln import bounded_map, maybe_await
from ..models.field import FormFieldConfig
from ..models.form import SubmissionSettings
from ..validation.base import Validator
from ..validation.combinators import ChainValidator
from ..validation.result import ValidationContext
from .observer import ChangeNotifier, Listener
from .state import FieldState, FormStatus

__all__ = ("FormController", "SubmitCallback")

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[dict[str, Any]], bool | Awaitable[bool]]
ValidatorsArg = Validator | Sequence[Validator] | None


def _compose(validators: ValidatorsArg) -> Validator | None:
    if validators is None:
        return None
    if isinstance(validators, Validator):
        return validators
    validators = list(validators)
    if not validators:
        return None
    if len(validators) == 1:
        return validators[0]
    return ChainValidator(validators)


class FormController:
    """Mutable state and orchestration for a single form instance.

    Every mutating operation notifies the change listeners once it is done.
    All state is owned by the controller; callers receive copies.
    """

    def __init__(
        self,
        form_id: str,
        *,
        live_validation: bool | None = None,
        submission: SubmissionSettings | None = None,
        settings: FormSettings | None = None,
    ):
        self.form_id = form_id
        self.settings = settings or default_settings
        self.live_validation = (
            self.settings.live_validation
            if live_validation is None
            else live_validation
        )
        self.submission = submission

        self._fields: dict[str, FieldState] = {}
        self._notifier = ChangeNotifier()
        self._status = FormStatus.CLEAN
        self._is_dirty = False
        self._is_submitting = False
        self._last_error: str | None = None
        self._submission_data: dict[str, Any] | None = None

        self._task_group_cm = None
        self._task_group: anyio.abc.TaskGroup | None = None

    # -- lifecycle ---------------------------------------------------------

    async def __aenter__(self) -> Self:
        if self._task_group is not None:
            raise RuntimeError(f"Form '{self.form_id}' is already running")
        self._task_group_cm = anyio.create_task_group()
        self._task_group = await self._task_group_cm.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool | None:
        tg_cm, self._task_group_cm = self._task_group_cm, None
        tg, self._task_group = self._task_group, None
        tg.cancel_scope.cancel()
        for state in self._fields.values():
            state.cancel_validation()
        return await tg_cm.__aexit__(exc_type, exc, tb)

    @property
    def is_running(self) -> bool:
        return self._task_group is not None

    def dispose(self) -> None:
        """Cancel in-flight validations and drop every field and listener."""
        if self._task_group is not None:
            self._task_group.cancel_scope.cancel()
        for state in self._fields.values():
            state.cancel_validation()
        self._fields.clear()
        self._notifier.clear()
        logger.debug("Disposed form '%s'", self.form_id)

    # -- observation -------------------------------------------------------

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Subscribe ``listener(controller)``.

        Returns:
            Callable that removes the subscription.
        """
        return self._notifier.subscribe(listener)

    def _notify(self) -> None:
        self._notifier.notify(self)

    # -- registration ------------------------------------------------------

    def register_field(
        self, config: FormFieldConfig, validators: ValidatorsArg = None
    ) -> None:
        """Register a field; several validators are composed as a chain.

        Raises:
            DuplicateFieldError: If the id is already registered.
        """
        if config.id in self._fields:
            raise DuplicateFieldError(config.id, form_id=self.form_id)
        self._fields[config.id] = FieldState.create(
            config, _compose(validators)
        )
        self._notify()

    def register_fields(
        self,
        configs: Iterable[FormFieldConfig],
        validators_map: Mapping[str, ValidatorsArg] | None = None,
    ) -> None:
        """Register several fields at once; nothing is registered on error."""
        configs = list(configs)
        validators_map = validators_map or {}

        seen = set(self._fields)
        for config in configs:
            if config.id in seen:
                raise DuplicateFieldError(config.id, form_id=self.form_id)
            seen.add(config.id)

        for config in configs:
            self._fields[config.id] = FieldState.create(
                config, _compose(validators_map.get(config.id))
            )
        self._notify()

    def unregister_field(self, field_id: str) -> None:
        state = self._fields.pop(field_id, None)
        if state is None:
            return
        state.cancel_validation()
        self._notify()

    # -- values ------------------------------------------------------------

    def _apply_value(self, state: FieldState, value: Any) -> None:
        state.value = value
        state.touch()
        state.validation_generation += 1
        state.cancel_validation()

    def _mark_dirty(self) -> None:
        self._is_dirty = True
        if self._status in (
            FormStatus.CLEAN,
            FormStatus.SUCCEEDED,
            FormStatus.FAILED,
        ):
            self._status = FormStatus.DIRTY

    def set_field_value(self, field_id: str, value: Any) -> None:
        """Store a new value for a field.

        Any validation in flight for the field becomes stale. With live
        validation active the field is re-validated in the background.
        """
        state = self._fields.get(field_id)
        if state is None:
            logger.debug(
                "Ignoring value for unknown field '%s' in form '%s'",
                field_id,
                self.form_id,
            )
            return

        self._apply_value(state, value)
        self._mark_dirty()
        self._notify()
        if self.live_validation:
            self._schedule_validation(field_id)

    def set_field_values(self, values: Mapping[str, Any]) -> None:
        """Set several values with a single change notification."""
        changed = []
        for field_id, value in values.items():
            state = self._fields.get(field_id)
            if state is None:
                logger.debug(
                    "Ignoring value for unknown field '%s' in form '%s'",
                    field_id,
                    self.form_id,
                )
                continue
            self._apply_value(state, value)
            changed.append(field_id)

        if not changed:
            return
        self._mark_dirty()
        self._notify()
        if self.live_validation:
            for field_id in changed:
                self._schedule_validation(field_id)

    def get_field_value(self, field_id: str, default: Any = None) -> Any:
        state = self._fields.get(field_id)
        return default if state is None else state.value

    def touch_field(self, field_id: str) -> None:
        if (state := self._fields.get(field_id)) is None:
            return
        state.touch()
        self._mark_dirty()
        self._notify()

    def _schedule_validation(self, field_id: str) -> None:
        if self._task_group is None:
            logger.debug(
                "Live validation of '%s' skipped: form '%s' is not running",
                field_id,
                self.form_id,
            )
            return
        self._task_group.start_soon(self.validate_field, field_id)

    # -- validation --------------------------------------------------------

    async def validate_field(self, field_id: str) -> bool:
        """Validate one field and record its error.

        Returns:
            True if the field is valid. False if it is invalid, unknown, or
            if the result was discarded because the value changed (or the
            field was removed) while validation was running.
        """
        state = self._fields.get(field_id)
        if state is None:
            logger.debug(
                "Cannot validate unknown field '%s' in form '%s'",
                field_id,
                self.form_id,
            )
            return False

        if state.validator is None:
            if state.error is not None:
                state.error = None
                self._notify()
            return True

        generation = state.validation_generation
        value = state.value
        signal = state.begin_validation()
        context = ValidationContext(
            field_id=field_id,
            values=self.values,
            label=state.config.label,
            signal=signal,
        )
        self._notify()

        try:
            result = await state.validator(value, field_id, context)
        except ValidationCancelled:
            logger.debug(
                "Validation of field '%s' in form '%s' was cancelled",
                field_id,
                self.form_id,
            )
            return False
        finally:
            state.end_validation(signal)

        if (
            self._fields.get(field_id) is not state
            or state.validation_generation != generation
        ):
            logger.debug(
                "Discarding stale validation result for field '%s' "
                "(generation %d, now %d)",
                field_id,
                generation,
                state.validation_generation,
            )
            return False

        if result.is_valid:
            state.error = None
        else:
            state.error = (
                result.error_message or f"{context.display_name} is invalid"
            )
        self._notify()
        return result.is_valid

    async def validate_all(self) -> bool:
        """Validate every visible field concurrently.

        Hidden fields have their error cleared and count as valid.
        """
        values = self.values
        visible = []
        for state in self._fields.values():
            if state.config.is_visible_for(values):
                visible.append(state.field_id)
            else:
                state.error = None

        results = await bounded_map(
            self.validate_field,
            visible,
            limit=self.settings.max_concurrent_validations,
        )
        self._notify()
        return all(results)

    # -- submission --------------------------------------------------------

    async def submit(self, on_submit: SubmitCallback) -> bool:
        """Validate the form, then hand the visible values to ``on_submit``.

        ``on_submit`` may be sync or async and reports success with a truthy
        return. Its exceptions are logged and recorded in ``last_error``,
        never re-raised. A submit while another is in flight returns False.
        """
        if self._is_submitting:
            logger.debug(
                "Form '%s' is already submitting; ignoring submit",
                self.form_id,
            )
            return False

        self._is_submitting = True
        self._last_error = None
        self._status = FormStatus.VALIDATING
        self._notify()

        try:
            if not await self.validate_all():
                self._last_error = self.settings.validation_failed_message
                self._status = FormStatus.FAILED
                return False

            self._status = FormStatus.SUBMITTING
            self._notify()

            payload = self._submission_payload()
            try:
                ok = await maybe_await(on_submit, payload)
            except Exception as e:
                logger.exception(
                    "Submission of form '%s' failed", self.form_id
                )
                self._last_error = str(e) or self._rejected_message()
                self._status = FormStatus.FAILED
                return False

            if not ok:
                self._last_error = self._rejected_message()
                self._status = FormStatus.FAILED
                return False

            self._submission_data = payload
            self._status = FormStatus.SUCCEEDED
            submission = self.submission
            if submission is not None and submission.clear_on_success:
                self._reset_values()
            return True
        finally:
            self._is_submitting = False
            self._notify()

    def _submission_payload(self) -> dict[str, Any]:
        values = self.values
        return {
            state.field_id: state.value
            for state in self._fields.values()
            if state.config.is_visible_for(values)
        }

    def _rejected_message(self) -> str:
        if self.submission is not None and self.submission.error_message:
            return self.submission.error_message
        return self.settings.submission_failed_message

    # -- reset -------------------------------------------------------------

    def _reset_values(self) -> None:
        for state in self._fields.values():
            state.reset()
        self._is_dirty = False

    def reset(self) -> None:
        """Restore every field to its initial value and the form to CLEAN."""
        self._reset_values()
        self._status = FormStatus.CLEAN
        self._last_error = None
        self._submission_data = None
        self._notify()

    def reset_field(self, field_id: str) -> None:
        if (state := self._fields.get(field_id)) is None:
            return
        state.reset()
        self._notify()

    def reset_fields(self, field_ids: Iterable[str]) -> None:
        for field_id in field_ids:
            if (state := self._fields.get(field_id)) is not None:
                state.reset()
        self._notify()

    def reset_submission_state(self) -> None:
        self._last_error = None
        self._submission_data = None
        if not self._is_submitting:
            self._status = (
                FormStatus.DIRTY if self._is_dirty else FormStatus.CLEAN
            )
        self._notify()

    def clear_errors(self) -> None:
        for state in self._fields.values():
            state.error = None
        self._notify()

    # -- errors ------------------------------------------------------------

    def get_field_error(self, field_id: str) -> str | None:
        state = self._fields.get(field_id)
        return None if state is None else state.error

    def set_field_error(self, field_id: str, message: str | None) -> None:
        """Record an externally supplied error, e.g. from the server.

        ``None`` clears the error.
        """
        if (state := self._fields.get(field_id)) is None:
            logger.debug(
                "Ignoring error for unknown field '%s' in form '%s'",
                field_id,
                self.form_id,
            )
            return
        state.error = message
        self._notify()

    # -- views -------------------------------------------------------------

    @property
    def values(self) -> dict[str, Any]:
        """Snapshot of every field's value, hidden ones included."""
        return {fid: state.value for fid, state in self._fields.items()}

    @property
    def errors(self) -> dict[str, str]:
        """Snapshot of the errors of visible, invalid fields."""
        values = self.values
        return {
            fid: state.error
            for fid, state in self._fields.items()
            if state.error is not None and state.config.is_visible_for(values)
        }

    @property
    def visible_field_ids(self) -> list[str]:
        values = self.values
        return [
            fid
            for fid, state in self._fields.items()
            if state.config.is_visible_for(values)
        ]

    def is_field_visible(self, field_id: str) -> bool:
        state = self._fields.get(field_id)
        return state is not None and state.config.is_visible_for(self.values)

    @property
    def field_ids(self) -> list[str]:
        return list(self._fields)

    def get_field_state(self, field_id: str) -> FieldState | None:
        state = self._fields.get(field_id)
        return None if state is None else state.snapshot()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_dirty(self) -> bool:
        return self._is_dirty

    @property
    def is_validating(self) -> bool:
        return any(s.is_validating for s in self._fields.values())

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def status(self) -> FormStatus:
        return self._status

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def submission_data(self) -> dict[str, Any] | None:
        if self._submission_data is None:
            return None
        return dict(self._submission_data)

    def summary(self) -> dict[str, Any]:
        """Overview of the form state, shaped for logging or debugging."""
        errors = self.errors
        return {
            "formId": self.form_id,
            "status": self._status.value,
            "isValid": not errors,
            "isDirty": self._is_dirty,
            "isSubmitting": self._is_submitting,
            "fieldCount": len(self._fields),
            "touchedCount": sum(s.is_touched for s in self._fields.values()),
            "errorCount": len(errors),
            "errors": errors,
            "lastError": self._last_error,
        }

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"FormController(form_id={self.form_id!r}, "
            f"fields={len(self._fields)}, status={self._status.value})"
        )
