# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Programmatic construction and transformation of form configs.

Everything here is a pure function of its inputs: configs are immutable, so
each operation returns a new ``FormBuilderConfig``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from .._errors import DuplicateFieldError, DuplicateFieldIdError
from ..models.field import FieldType, FormFieldConfig, FormSection
from ..models.form import FormBuilderConfig, SubmissionSettings

__all__ = ("DynamicFormBuilder",)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

FieldOverride = FormFieldConfig | Mapping[str, Any]


def _rebuild(model: M, **changes: Any) -> M:
    """Validated copy of a frozen model with ``changes`` applied."""
    data = {name: getattr(model, name) for name in type(model).model_fields}
    data.update(changes)
    return type(model).model_validate(data)


class DynamicFormBuilder:

    @staticmethod
    def from_sections(
        form_id: str,
        sections: Iterable[FormSection],
        *,
        title: str | None = None,
        description: str | None = None,
        submission: SubmissionSettings | None = None,
    ) -> FormBuilderConfig:
        """Assemble a form from sections that carry their own fields.

        Raises:
            DuplicateFieldError: If two sections carry the same field id.
        """
        sections = tuple(sections)
        fields: list[FormFieldConfig] = []
        seen: set[str] = set()
        for section in sections:
            for field in section.fields:
                if field.id in seen:
                    raise DuplicateFieldError(field.id, form_id=form_id)
                seen.add(field.id)
                fields.append(field)

        return FormBuilderConfig(
            form_id=form_id,
            title=title,
            description=description,
            fields=tuple(fields),
            sections=sections,
            submission=submission,
        )

    @staticmethod
    def simple_form(
        form_id: str,
        field_ids: Iterable[str],
        *,
        title: str | None = None,
    ) -> FormBuilderConfig:
        """Required text fields labelled after their ids.

        ``"first_name"`` gets the label ``"First Name"``.
        """
        fields = tuple(
            FormFieldConfig(
                id=field_id,
                field_type=FieldType.TEXT,
                label=field_id.replace("_", " ").title(),
                is_required=True,
            )
            for field_id in field_ids
        )
        return FormBuilderConfig(form_id=form_id, title=title, fields=fields)

    @staticmethod
    def merge_forms(
        form_id: str,
        forms: Iterable[FormBuilderConfig],
        *,
        title: str | None = None,
    ) -> FormBuilderConfig:
        """Concatenate the fields and sections of several forms, in order.

        Raises:
            DuplicateFieldIdError: If a field id appears in more than one of
                the merged forms.
        """
        owners: dict[str, str] = {}
        fields: list[FormFieldConfig] = []
        sections: list[FormSection] = []
        for form in forms:
            for field in form.fields:
                if field.id in owners:
                    raise DuplicateFieldIdError(
                        field.id, [owners[field.id], form.form_id]
                    )
                owners[field.id] = form.form_id
                fields.append(field)
            sections.extend(form.sections)

        return FormBuilderConfig(
            form_id=form_id,
            title=title,
            fields=tuple(fields),
            sections=tuple(sections),
        )

    @staticmethod
    def filter_form(
        form: FormBuilderConfig,
        predicate: Callable[[FormFieldConfig], bool],
        *,
        new_form_id: str | None = None,
    ) -> FormBuilderConfig:
        """Keep only the fields matching ``predicate``.

        Sections are pruned to the retained fields; sections left empty are
        dropped.
        """
        fields = tuple(f for f in form.fields if predicate(f))
        kept = {f.id for f in fields}

        sections = []
        for section in form.sections:
            field_ids = tuple(i for i in section.field_ids if i in kept)
            if not field_ids:
                continue
            sections.append(
                _rebuild(
                    section,
                    field_ids=field_ids,
                    fields=tuple(f for f in section.fields if f.id in kept),
                )
            )

        return _rebuild(
            form,
            form_id=new_form_id or form.form_id,
            fields=fields,
            sections=tuple(sections),
        )

    @staticmethod
    def clone_form(
        form: FormBuilderConfig,
        new_form_id: str,
        field_overrides: Mapping[str, FieldOverride] | None = None,
    ) -> FormBuilderConfig:
        """Copy ``form`` under a new id, optionally replacing some fields.

        An override is either a complete ``FormFieldConfig`` or a mapping of
        changes applied with :meth:`FormFieldConfig.copy_with`. Overrides for
        ids the form does not have are ignored.
        """
        field_overrides = field_overrides or {}
        unknown = set(field_overrides) - set(form.field_ids)
        if unknown:
            logger.debug(
                "Ignoring overrides for unknown fields of form '%s': %s",
                form.form_id,
                ", ".join(sorted(unknown)),
            )

        def _apply(field: FormFieldConfig) -> FormFieldConfig:
            override = field_overrides.get(field.id)
            if override is None:
                return field
            if isinstance(override, FormFieldConfig):
                if override.id != field.id:
                    raise ValueError(
                        f"Override for field '{field.id}' has id "
                        f"'{override.id}'"
                    )
                return override
            return field.copy_with(**override)

        sections = tuple(
            _rebuild(s, fields=tuple(_apply(f) for f in s.fields))
            if s.fields
            else s
            for s in form.sections
        )
        return _rebuild(
            form,
            form_id=new_form_id,
            fields=tuple(_apply(f) for f in form.fields),
            sections=sections,
        )
