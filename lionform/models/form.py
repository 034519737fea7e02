# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, model_validator

from .._errors import DuplicateFieldError, InvalidDeclarationError
from .field import FormFieldConfig, FormSection, _ConfigModel

__all__ = ("SubmissionSettings", "FormBuilderConfig")


class SubmissionSettings(_ConfigModel):
    """Submission options carried alongside a form definition.

    Only ``clear_on_success`` is acted upon by the controller; the rest is
    metadata for whoever implements the submission callback.
    """

    endpoint: str | None = None
    method: str = "POST"
    include_csrf_token: bool = True
    success_message: str | None = None
    error_message: str | None = None
    redirect_url: str | None = None
    clear_on_success: bool = False
    webhooks: dict[str, str] = Field(default_factory=dict)


class FormBuilderConfig(_ConfigModel):
    """Immutable, declarative description of a whole form.

    ``fields`` lists every field of the form: fields carried by a section
    are appended to it on validation, and sections only index into it.
    """

    form_id: str = Field(min_length=1)
    title: str | None = None
    description: str | None = None
    fields: tuple[FormFieldConfig, ...] = ()
    sections: tuple[FormSection, ...] = ()
    submission: SubmissionSettings | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "submission", "submissionSettings", "submission_settings"
        ),
    )
    show_inline_errors: bool = True
    disable_on_submit: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_field_ids(self) -> FormBuilderConfig:
        seen = {}
        for field in self.fields:
            if field.id in seen:
                raise DuplicateFieldError(field.id, form_id=self.form_id)
            seen[field.id] = field

        # fields carried by sections join the form's field list
        carried = []
        for section in self.sections:
            for field in section.fields:
                if field.id not in seen:
                    seen[field.id] = field
                    carried.append(field)
                elif seen[field.id] != field:
                    raise DuplicateFieldError(field.id, form_id=self.form_id)
        if carried:
            object.__setattr__(self, "fields", self.fields + tuple(carried))

        for section in self.sections:
            missing = [i for i in section.field_ids if i not in seen]
            if missing:
                raise InvalidDeclarationError(
                    f"Section '{section.id}' of form '{self.form_id}' "
                    f"references unknown fields: {', '.join(missing)}",
                    details={"section_id": section.id, "field_ids": missing},
                )
        return self

    @property
    def field_ids(self) -> list[str]:
        return [f.id for f in self.fields]

    def get_field(
        self, field_id: str, default: FormFieldConfig | None = None
    ) -> FormFieldConfig | None:
        for f in self.fields:
            if f.id == field_id:
                return f
        return default

    def field(self, field_id: str) -> FormFieldConfig:
        if (f := self.get_field(field_id)) is None:
            raise KeyError(
                f"Field '{field_id}' not found in form '{self.form_id}'"
            )
        return f

    def section(self, section_id: str) -> FormSection:
        for s in self.sections:
            if s.id == section_id:
                return s
        raise KeyError(
            f"Section '{section_id}' not found in form '{self.form_id}'"
        )

    def section_fields(self, section_id: str) -> list[FormFieldConfig]:
        """Fields of a section, resolved against this form's field list."""
        return [self.field(i) for i in self.section(section_id).field_ids]
