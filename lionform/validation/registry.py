# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""
ValidatorRegistry: name -> factory lookup used to resolve the validator
references of declarative form fields.

Built-in validators are pre-registered; hosts add their own before parsing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from .._errors import (
    FormDefinitionError,
    UnknownValidatorError,
    ValidatorConfigError,
)
from ..models.field import FormFieldConfig, ValidatorRef
from .base import Validator
from .primitives import (
    EmailValidator,
    EnumValidator,
    GreaterThanValidator,
    LengthValidator,
    LessThanValidator,
    MatchValidator,
    NumericValidator,
    PatternValidator,
    PhoneValidator,
    RequiredValidator,
    UrlValidator,
    to_number,
)

__all__ = (
    "ValidatorFactory",
    "ValidatorRegistry",
    "BUILTIN_VALIDATORS",
    "default_registry",
    "normalize_name",
    "parse_ref",
)

logger = logging.getLogger(__name__)

ValidatorFactory = Callable[[FormFieldConfig, dict[str, Any]], Validator]
"""Builds a validator for ``field`` from the reference's ``params``."""


def normalize_name(name: str) -> str:
    """``"greater_than"``, ``"greaterThan"`` and ``"greater-than"`` all map to
    ``"greaterthan"``."""
    return name.strip().lower().replace("_", "").replace("-", "")


def parse_ref(ref: ValidatorRef) -> tuple[str, dict[str, Any]]:
    """Split a validator reference into ``(name, params)``.

    References are ``"name"``, ``"name:arg"`` (``params["arg"]``) or a
    mapping ``{"name": ..., **params}``.
    """
    if isinstance(ref, Mapping):
        params = dict(ref)
        name = params.pop("name", None) or params.pop("type", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Validator reference has no name: {ref!r}")
        return name.strip(), params
    if isinstance(ref, str):
        name, sep, arg = ref.partition(":")
        return name.strip(), ({"arg": arg.strip()} if sep else {})
    raise TypeError(f"Unsupported validator reference: {ref!r}")


def _lookup(
    field: FormFieldConfig,
    params: dict[str, Any],
    keys: tuple[str, ...],
    *,
    attr: str | None = None,
    metadata_keys: tuple[str, ...] = (),
) -> Any:
    """First value found in ref params, then the field, then metadata."""
    for key in keys:
        if params.get(key) is not None:
            return params[key]
    if attr is not None and getattr(field, attr) is not None:
        return getattr(field, attr)
    for key in metadata_keys:
        if field.metadata.get(key) is not None:
            return field.metadata[key]
    return None


def _split_arg(params: dict[str, Any]) -> list[str]:
    arg = params.get("arg")
    if not arg:
        return []
    return [a.strip() for a in str(arg).split(",")]


def _as_int(value: Any, what: str) -> int | None:
    if value is None or value == "":
        return None
    number = to_number(value)
    if number is None or int(number) != number:
        raise ValueError(f"{what} must be an integer, got {value!r}")
    return int(number)


def _as_number(value: Any, what: str) -> int | float | None:
    if value is None or value == "":
        return None
    number = to_number(value)
    if number is None:
        raise ValueError(f"{what} must be a number, got {value!r}")
    return number


def _build_length(field, params):
    args = _split_arg(params)
    min_length = _lookup(
        field, params, ("min", "minLength", "min_length"),
        attr="min_length", metadata_keys=("minLength", "min_length"),
    )
    max_length = _lookup(
        field, params, ("max", "maxLength", "max_length"),
        attr="max_length", metadata_keys=("maxLength", "max_length"),
    )
    if args:
        min_length = args[0] or min_length
        if len(args) > 1:
            max_length = args[1] or max_length
    return LengthValidator(
        min_length=_as_int(min_length, "minLength"),
        max_length=_as_int(max_length, "maxLength"),
    )


def _build_pattern(field, params):
    pattern = _lookup(
        field, params, ("arg", "pattern", "regex"), metadata_keys=("pattern",)
    )
    if not pattern:
        raise ValueError("a 'pattern' parameter is required")
    message = _lookup(
        field, params, ("message",),
        metadata_keys=("patternMessage", "pattern_message"),
    )
    return PatternValidator(pattern, message=message)


def _build_numeric(field, params):
    args = _split_arg(params)
    min_value = _lookup(
        field, params, ("min", "minValue", "min_value"),
        attr="min_value", metadata_keys=("minValue", "min_value"),
    )
    max_value = _lookup(
        field, params, ("max", "maxValue", "max_value"),
        attr="max_value", metadata_keys=("maxValue", "max_value"),
    )
    if args:
        min_value = args[0] or min_value
        if len(args) > 1:
            max_value = args[1] or max_value
    return NumericValidator(
        min_value=_as_number(min_value, "minValue"),
        max_value=_as_number(max_value, "maxValue"),
    )


def _build_enum(field, params):
    allowed = _lookup(
        field, params, ("values", "allowedValues", "allowed_values"),
        metadata_keys=("allowedValues", "allowed_values"),
    )
    if allowed is None and params.get("arg"):
        allowed = _split_arg(params)
    if allowed is None and field.options:
        allowed = field.option_values
    if not allowed:
        raise ValueError("allowed values or field options are required")
    return EnumValidator(allowed)


def _build_match(field, params):
    other = _lookup(
        field, params, ("arg", "field", "matchField", "match_field"),
        metadata_keys=("matchField", "match_field"),
    )
    if not other:
        raise ValueError("a 'matchField' parameter is required")
    return MatchValidator(str(other))


def _comparison_factory(cls, metadata_key: str):

    def _build(field, params):
        other = _lookup(
            field, params, ("field", "otherField", "other_field")
        )
        if other:
            return cls(other_field=str(other))

        bound = _lookup(
            field, params, ("arg", "value", metadata_key),
            metadata_keys=(metadata_key,),
        )
        if bound is None or bound == "":
            raise ValueError(f"a '{metadata_key}' parameter is required")
        if to_number(bound) is None:
            # non-numeric positional arguments name another field
            return cls(other_field=str(bound))
        return cls(to_number(bound))

    return _build


BUILTIN_VALIDATORS: dict[str, ValidatorFactory] = {
    "required": lambda field, params: RequiredValidator(),
    "email": lambda field, params: EmailValidator(),
    "url": lambda field, params: UrlValidator(),
    "phone": lambda field, params: PhoneValidator(),
    "length": _build_length,
    "pattern": _build_pattern,
    "numeric": _build_numeric,
    "enum": _build_enum,
    "match": _build_match,
    "greaterthan": _comparison_factory(GreaterThanValidator, "minValue"),
    "lessthan": _comparison_factory(LessThanValidator, "maxValue"),
}


class ValidatorRegistry:
    """Registry of validator factories, keyed by normalised name."""

    def __init__(
        self,
        factories: Mapping[str, ValidatorFactory] | None = None,
        *,
        include_builtins: bool = True,
    ):
        self._factories: dict[str, ValidatorFactory] = {}
        if include_builtins:
            self._factories.update(BUILTIN_VALIDATORS)
        for name, factory in (factories or {}).items():
            self.register(name, factory, replace=True)

    def register(
        self, name: str, factory: ValidatorFactory, *, replace: bool = False
    ) -> None:
        """Add a factory under ``name``.

        Raises:
            ValueError: If the name is taken and ``replace`` is False.
        """
        key = normalize_name(name)
        if not key:
            raise ValueError("Validator name cannot be empty")
        if key in self._factories and not replace:
            raise ValueError(f"Validator '{name}' is already registered")
        self._factories[key] = factory

    def register_validator(self, name: str, *, replace: bool = False):
        """Decorator form of :meth:`register`."""

        def decorator(factory: ValidatorFactory) -> ValidatorFactory:
            self.register(name, factory, replace=replace)
            return factory

        return decorator

    def unregister(self, name: str) -> None:
        self._factories.pop(normalize_name(name), None)

    def get(self, name: str) -> ValidatorFactory | None:
        return self._factories.get(normalize_name(name))

    @property
    def names(self) -> list[str]:
        return list(self._factories)

    def copy(self) -> ValidatorRegistry:
        return ValidatorRegistry(self._factories, include_builtins=False)

    def __contains__(self, name: object) -> bool:
        return (
            isinstance(name, str) and normalize_name(name) in self._factories
        )

    def __len__(self) -> int:
        return len(self._factories)

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def resolve(self, field: FormFieldConfig, ref: ValidatorRef) -> Validator:
        """Build the validator a single reference of ``field`` points to.

        Raises:
            UnknownValidatorError: If no factory is registered for the name.
            ValidatorConfigError: If the factory cannot build the validator
                from the available parameters.
        """
        try:
            name, params = parse_ref(ref)
        except (TypeError, ValueError) as e:
            raise ValidatorConfigError(
                str(ref), field.id, str(e), cause=e
            ) from e

        factory = self.get(name)
        if factory is None:
            raise UnknownValidatorError(field.id, name)

        try:
            validator = factory(field, params)
        except FormDefinitionError:
            raise
        except (TypeError, ValueError, KeyError) as e:
            raise ValidatorConfigError(name, field.id, str(e), cause=e) from e

        if not isinstance(validator, Validator):
            raise ValidatorConfigError(
                name,
                field.id,
                f"factory returned {type(validator).__name__}, "
                "expected a Validator",
            )
        return self._apply_message(field, name, validator)

    def resolve_field(self, field: FormFieldConfig) -> list[Validator]:
        """Resolve every reference of ``field``, in declaration order.

        A required field without an explicit ``required`` reference gets a
        RequiredValidator in front of the others.
        """
        refs = list(field.validator_refs)
        validators = [self.resolve(field, ref) for ref in refs]

        named = {normalize_name(parse_ref(ref)[0]) for ref in refs}
        if field.is_required and "required" not in named:
            validators.insert(
                0,
                self._apply_message(field, "required", RequiredValidator()),
            )

        logger.debug(
            "Resolved %d validator(s) for field '%s'",
            len(validators),
            field.id,
        )
        return validators

    @staticmethod
    def _apply_message(
        field: FormFieldConfig, name: str, validator: Validator
    ) -> Validator:
        key = normalize_name(name)
        for msg_name, message in field.validation_messages.items():
            if normalize_name(msg_name) == key:
                return validator.with_message(message)
        return validator


def default_registry() -> ValidatorRegistry:
    """A fresh registry holding only the built-in validators."""
    return ValidatorRegistry()
