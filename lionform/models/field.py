# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from typing_extensions import Self

from ..ln import json_dumps

__all__ = (
    "FieldType",
    "CHOICE_FIELD_TYPES",
    "FormFieldOption",
    "VisibilityCondition",
    "VisibilityPredicate",
    "ValidatorRef",
    "FormFieldConfig",
    "FormSection",
)

logger = logging.getLogger(__name__)


VisibilityPredicate = Callable[[Mapping[str, Any]], bool]
ValidatorRef = str | dict[str, Any]


class FieldType(Enum):
    """Kinds of field a form can declare.

    The core never interprets the kind beyond the choice-field invariant; it
    is carried through for the rendering layer.
    """

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    PHONE = "phone"
    NUMBER = "number"
    DECIMAL = "decimal"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    MULTISELECT = "multiselect"
    TEXTAREA = "textarea"
    SLIDER = "slider"
    TOGGLE = "toggle"
    FILE = "file"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, name: str | None) -> FieldType | None:
        """Look up a member by wire name, case-insensitively."""
        if name is None:
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None

    @property
    def is_choice(self) -> bool:
        return self in CHOICE_FIELD_TYPES


CHOICE_FIELD_TYPES = frozenset(
    {FieldType.RADIO, FieldType.SELECT, FieldType.MULTISELECT}
)


def _field_type_name(v: FieldType | str) -> str:
    return v.value if isinstance(v, FieldType) else v


class _ConfigModel(BaseModel):

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Dump to the camelCase document shape, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, *, pretty: bool = False) -> str:
        return json_dumps(self.to_dict(), pretty=pretty)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        return cls.model_validate(data)


class FormFieldOption(_ConfigModel):
    """A selectable ``{value, label}`` pair of a choice field."""

    value: Any
    label: str
    is_disabled: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_label(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("label") is None:
            data = {**data, "label": str(data.get("value"))}
        return data


class VisibilityCondition(_ConfigModel):
    """Declarative visibility rule.

    The field is visible when ``values[depends_on] == value``.
    """

    depends_on: str
    value: Any = None

    def __call__(self, values: Mapping[str, Any]) -> bool:
        return values.get(self.depends_on) == self.value


class FormFieldConfig(_ConfigModel):
    """Immutable description of one form field."""

    id: str = Field(min_length=1)
    field_type: FieldType | str = FieldType.TEXT
    label: str = ""
    placeholder: str | None = None
    helper_text: str | None = None
    hint: str | None = None
    initial_value: Any = None

    is_required: bool = False
    is_disabled: bool = False
    is_visible: bool = True

    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    min_value: float | int | None = None
    max_value: float | int | None = None

    validator_refs: tuple[ValidatorRef, ...] = Field(
        default=(),
        alias="validators",
        validation_alias=AliasChoices(
            "validators", "validatorRefs", "validator_refs"
        ),
    )
    """Ordered validator references, resolved by a ValidatorRegistry."""

    validation_messages: dict[str, str] = Field(default_factory=dict)
    """Per-validator failure message overrides, keyed by validator name."""

    visibility_condition: VisibilityCondition | VisibilityPredicate | None = (
        Field(default=None, union_mode="left_to_right")
    )
    options: tuple[FormFieldOption, ...] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_label(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and not data.get("label"):
            data = {**data, "label": data.get("id", "")}
        return data

    @field_validator("field_type", mode="before")
    @classmethod
    def _parse_field_type(cls, v: Any) -> Any:
        if v is None:
            return FieldType.TEXT
        if isinstance(v, str):
            # unknown kinds are kept verbatim for forward compatibility
            return FieldType.parse(v) or v.strip()
        return v

    @field_validator("validator_refs", mode="before")
    @classmethod
    def _wrap_single_ref(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, (str, Mapping)):
            return (v,)
        return v

    @model_validator(mode="after")
    def _check_constraints(self) -> FormFieldConfig:
        if self.is_choice and not self.options:
            raise ValueError(
                f"Choice field '{self.id}' requires a non-empty options list"
            )
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(
                f"Field '{self.id}': min_length {self.min_length} exceeds "
                f"max_length {self.max_length}"
            )
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError(
                f"Field '{self.id}': min_value {self.min_value} exceeds "
                f"max_value {self.max_value}"
            )
        return self

    @field_serializer("field_type")
    def _serialize_field_type(self, v: FieldType | str) -> str:
        return _field_type_name(v)

    @field_serializer("visibility_condition")
    def _serialize_visibility(self, v: Any) -> dict[str, Any] | None:
        # plain predicates have no document form
        if isinstance(v, VisibilityCondition):
            return v.to_dict()
        return None

    @property
    def is_choice(self) -> bool:
        return (
            isinstance(self.field_type, FieldType)
            and self.field_type.is_choice
        )

    @property
    def field_type_name(self) -> str:
        return _field_type_name(self.field_type)

    @property
    def option_values(self) -> list[Any]:
        return [o.value for o in self.options or ()]

    def is_visible_for(self, values: Mapping[str, Any]) -> bool:
        """Whether the field takes part in validation given ``values``.

        A visibility condition that raises is logged and the field is
        treated as visible.
        """
        if not self.is_visible:
            return False
        if self.visibility_condition is None:
            return True
        try:
            return bool(self.visibility_condition(values))
        except Exception:
            logger.exception(
                "Visibility condition of field '%s' raised; "
                "treating the field as visible",
                self.id,
            )
            return True

    def copy_with(self, **changes: Any) -> FormFieldConfig:
        """Return a validated copy with ``changes`` applied.

        Keys may use attribute names or document (camelCase) aliases.
        """
        fields = type(self).model_fields
        names = {}
        for name, info in fields.items():
            names[name] = names[to_camel(name)] = name
            if info.alias:
                names[info.alias] = name

        data = {name: getattr(self, name) for name in fields}
        for key, value in changes.items():
            if key not in names:
                raise ValueError(f"Unknown field attribute: {key}")
            data[names[key]] = value
        return type(self).model_validate(data)


class FormSection(_ConfigModel):
    """Named grouping of fields; carries no validation semantics.

    A section either carries its fields (``fields``) or references fields of
    the enclosing form by id (``field_ids``). ``field_ids`` always lists
    every field of the section.
    """

    id: str = Field(min_length=1)
    title: str | None = None
    description: str | None = None
    field_ids: tuple[str, ...] = ()
    fields: tuple[FormFieldConfig, ...] = ()
    is_collapsible: bool = False
    is_collapsed: bool = False

    @model_validator(mode="after")
    def _sync_field_ids(self) -> FormSection:
        missing = tuple(
            f.id for f in self.fields if f.id not in self.field_ids
        )
        if missing:
            object.__setattr__(self, "field_ids", self.field_ids + missing)
        return self
