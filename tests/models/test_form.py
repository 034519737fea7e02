# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import pytest

from lionform._errors import DuplicateFieldError, InvalidDeclarationError
from lionform.models import (
    FormBuilderConfig,
    FormFieldConfig,
    FormSection,
    SubmissionSettings,
)


def _fields(*ids):
    return [FormFieldConfig(id=i) for i in ids]


class TestFormBuilderConfig:

    def test_duplicate_field_ids(self):
        with pytest.raises(DuplicateFieldError) as exc_info:
            FormBuilderConfig(form_id="f", fields=_fields("a", "b", "a"))
        assert exc_info.value.field_id == "a"

    def test_section_must_reference_known_fields(self):
        with pytest.raises(InvalidDeclarationError, match="missing"):
            FormBuilderConfig(
                form_id="f",
                fields=_fields("a"),
                sections=[FormSection(id="s", field_ids=["a", "missing"])],
            )

    def test_section_carried_fields_join_fields(self):
        config = FormBuilderConfig(
            form_id="f",
            fields=_fields("a"),
            sections=[FormSection(id="s", fields=_fields("b", "c"))],
        )
        assert config.field_ids == ["a", "b", "c"]
        assert [f.id for f in config.section_fields("s")] == ["b", "c"]

    def test_conflicting_carried_field(self):
        with pytest.raises(DuplicateFieldError):
            FormBuilderConfig(
                form_id="f",
                fields=[FormFieldConfig(id="a", label="A")],
                sections=[
                    FormSection(
                        id="s", fields=[FormFieldConfig(id="a", label="B")]
                    )
                ],
            )

    def test_lookups(self):
        config = FormBuilderConfig(
            form_id="f",
            fields=_fields("a", "b"),
            sections=[FormSection(id="s", field_ids=["b"])],
        )
        assert config.field("a").id == "a"
        assert config.get_field("zzz") is None
        assert [f.id for f in config.section_fields("s")] == ["b"]
        with pytest.raises(KeyError):
            config.field("zzz")
        with pytest.raises(KeyError):
            config.section("zzz")

    def test_submission_aliases(self):
        config = FormBuilderConfig.from_dict(
            {
                "formId": "f",
                "submissionSettings": {
                    "endpoint": "/api/signup",
                    "clearOnSuccess": True,
                },
            }
        )
        assert isinstance(config.submission, SubmissionSettings)
        assert config.submission.clear_on_success is True
        assert config.submission.method == "POST"

    def test_json_round_trip(self):
        config = FormBuilderConfig(
            form_id="f",
            title="Feedback",
            fields=_fields("a", "b"),
            sections=[FormSection(id="s", field_ids=["a"])],
        )
        again = FormBuilderConfig.model_validate_json(config.to_json())
        assert again.to_dict() == config.to_dict()
