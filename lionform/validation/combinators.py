# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Validators built from other validators.

Sub-validators always run in the order they were declared; nothing is
reordered or skipped beyond what each combinator's semantics require.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import anyio

from .._errors import ValidationCancelled
from ..config import settings
from ..ln import maybe_await
from .base import Validator, display_name
from .result import ValidationContext, ValidationResult

__all__ = (
    "ChainValidator",
    "AndValidator",
    "OrValidator",
    "NotValidator",
    "ConditionalValidator",
    "CustomValidator",
    "AsyncValidator",
    "chain",
    "all_of",
    "any_of",
    "negate",
    "when",
    "custom",
)

Predicate = Callable[[Any, ValidationContext | None], bool | Awaitable[bool]]
CheckFn = Callable[
    [Any, str, ValidationContext | None],
    bool | ValidationResult | Awaitable[bool | ValidationResult],
]


def _coerce_outcome(
    outcome: Any, message: str
) -> ValidationResult:
    if isinstance(outcome, ValidationResult):
        return outcome
    if outcome:
        return ValidationResult.success()
    return ValidationResult.failure(message)


class _CompositeValidator(Validator):

    def __init__(self, validators: Iterable[Validator]):
        self.validators = list(validators)
        if not self.validators:
            raise ValueError(
                f"{self.__class__.__name__} needs at least one validator"
            )

    def __repr__(self) -> str:
        inner = ", ".join(v.name for v in self.validators)
        return f"{self.__class__.__name__}([{inner}])"


class ChainValidator(_CompositeValidator):
    """Ordered AND that stops at the first failure and reports it."""

    name = "chain"

    async def validate(self, value, field_id, context=None):
        for validator in self.validators:
            result = await validator(value, field_id, context)
            if not result.is_valid:
                return result
        return ValidationResult.success()


class AndValidator(_CompositeValidator):
    """Runs every sub-validator; valid only if all of them are.

    On failure the first failing message is reported (or all of them joined
    with ``"; "`` when ``expose_all`` is set) and every failing result is
    kept under ``details["failures"]``.
    """

    name = "and"

    def __init__(
        self,
        validators: Iterable[Validator],
        *,
        expose_all: bool = False,
    ):
        super().__init__(validators)
        self.expose_all = expose_all

    async def validate(self, value, field_id, context=None):
        failures: list[ValidationResult] = []
        for validator in self.validators:
            result = await validator(value, field_id, context)
            if not result.is_valid:
                failures.append(result)

        if not failures:
            return ValidationResult.success()

        if self.expose_all:
            message = "; ".join(f.error_message or "" for f in failures)
        else:
            message = failures[0].error_message or ""
        return ValidationResult.failure(
            message, details={"failures": failures}
        )


class OrValidator(_CompositeValidator):
    """Valid as soon as one sub-validator is valid."""

    name = "or"

    def __init__(
        self,
        validators: Iterable[Validator],
        *,
        message: str | None = None,
    ):
        super().__init__(validators)
        self.message = message

    async def validate(self, value, field_id, context=None):
        failures: list[ValidationResult] = []
        for validator in self.validators:
            result = await validator(value, field_id, context)
            if result.is_valid:
                return result
            failures.append(result)

        message = self.message or "; ".join(
            f.error_message or "" for f in failures
        )
        return ValidationResult.failure(
            message, details={"failures": failures}
        )


class NotValidator(Validator):
    """Inverts a validator. The failure message must be supplied."""

    name = "not"

    def __init__(self, validator: Validator, message: str):
        if not message:
            raise ValueError("NotValidator requires an error message")
        self.validator = validator
        self.message = message

    async def validate(self, value, field_id, context=None):
        result = await self.validator(value, field_id, context)
        if result.is_valid:
            return ValidationResult.failure(self.message)
        return ValidationResult.success()


class ConditionalValidator(Validator):
    """Delegates to ``validator`` when ``predicate(value, context)`` holds."""

    name = "conditional"

    def __init__(self, predicate: Predicate, validator: Validator):
        self.predicate = predicate
        self.validator = validator

    async def validate(self, value, field_id, context=None):
        if not await maybe_await(self.predicate, value, context):
            return ValidationResult.success()
        return await self.validator(value, field_id, context)


class CustomValidator(Validator):
    """Adapts a plain check function into a validator.

    ``fn(value, field_id, context)`` may be sync or async and returns either
    a bool or a full ValidationResult. On a falsy return the message comes
    from ``message_fn(display_name)``, then ``message``, then a generic one.
    """

    def __init__(
        self,
        fn: CheckFn,
        message_fn: Callable[[str], str] | None = None,
        *,
        message: str | None = None,
        name: str | None = None,
    ):
        self.fn = fn
        self.message_fn = message_fn
        self.message = message
        self.name = name or getattr(fn, "__name__", "custom")

    def _failure_message(self, field_id, context) -> str:
        subject = display_name(field_id, context)
        if self.message_fn is not None:
            return self.message_fn(subject)
        return self.message or f"{subject} is invalid"

    async def validate(self, value, field_id, context=None):
        outcome = await maybe_await(self.fn, value, field_id, context)
        return _coerce_outcome(
            outcome, self._failure_message(field_id, context)
        )


class AsyncValidator(CustomValidator):
    """Validator whose check is a coroutine, e.g. a server-side lookup.

    The check is abandoned as soon as the context's cancel signal fires, and
    the validation then raises :class:`ValidationCancelled` so the caller
    discards it. With a ``timeout`` (seconds, defaulting to
    ``settings.async_validation_timeout``) a check that takes too long
    resolves to a failure.
    """

    def __init__(
        self,
        fn: CheckFn,
        message_fn: Callable[[str], str] | None = None,
        *,
        message: str | None = None,
        name: str | None = None,
        timeout: float | None = None,
    ):
        super().__init__(fn, message_fn, message=message, name=name)
        self.timeout = timeout

    async def validate(self, value, field_id, context=None):
        signal = context.signal if context is not None else None
        if signal is not None:
            signal.raise_if_cancelled()

        timeout = self.timeout
        if timeout is None:
            timeout = settings.async_validation_timeout
        if timeout is None:
            outcome = await self._run(value, field_id, context)
        else:
            outcome = None
            with anyio.move_on_after(timeout) as scope:
                outcome = await self._run(value, field_id, context)
            if scope.cancelled_caught:
                if signal is not None:
                    signal.raise_if_cancelled()
                return ValidationResult.failure(
                    settings.timeout_message, details={"timeout": timeout}
                )

        if signal is not None:
            signal.raise_if_cancelled()
        return _coerce_outcome(
            outcome, self._failure_message(field_id, context)
        )

    async def _run(self, value, field_id, context):
        signal = context.signal if context is not None else None
        if signal is None:
            return await maybe_await(self.fn, value, field_id, context)

        outcome = None
        error: Exception | None = None

        async def _watch() -> None:
            await signal.wait()
            tg.cancel_scope.cancel()

        async with anyio.create_task_group() as tg:
            tg.start_soon(_watch)
            try:
                outcome = await maybe_await(self.fn, value, field_id, context)
            except Exception as e:
                error = e
            tg.cancel_scope.cancel()

        if signal.is_cancelled:
            raise ValidationCancelled()
        if error is not None:
            raise error
        return outcome


def chain(*validators: Validator) -> ChainValidator:
    return ChainValidator(validators)


def all_of(*validators: Validator, expose_all: bool = False) -> AndValidator:
    return AndValidator(validators, expose_all=expose_all)


def any_of(*validators: Validator, message: str | None = None) -> OrValidator:
    return OrValidator(validators, message=message)


def negate(validator: Validator, message: str) -> NotValidator:
    return NotValidator(validator, message)


def when(predicate: Predicate, validator: Validator) -> ConditionalValidator:
    return ConditionalValidator(predicate, validator)


def custom(
    fn: CheckFn,
    message: str | None = None,
    *,
    name: str | None = None,
) -> CustomValidator:
    return CustomValidator(fn, message=message, name=name)
