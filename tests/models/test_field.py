# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from pydantic import ValidationError

from lionform.models import (
    FieldType,
    FormFieldConfig,
    FormFieldOption,
    FormSection,
    VisibilityCondition,
)


class TestFieldType:

    def test_parse_is_case_insensitive(self):
        assert FieldType.parse("MultiSelect") is FieldType.MULTISELECT
        assert FieldType.parse(" email ") is FieldType.EMAIL

    def test_parse_unknown_returns_none(self):
        assert FieldType.parse("signature") is None
        assert FieldType.parse(None) is None

    def test_choice_kinds(self):
        assert FieldType.RADIO.is_choice
        assert FieldType.SELECT.is_choice
        assert FieldType.MULTISELECT.is_choice
        assert not FieldType.CHECKBOX.is_choice


class TestFormFieldOption:

    def test_label_defaults_to_value(self):
        option = FormFieldOption(value=3)
        assert option.label == "3"
        assert option.is_disabled is False


class TestFormFieldConfig:

    def test_defaults(self):
        field = FormFieldConfig(id="email")
        assert field.label == "email"
        assert field.field_type is FieldType.TEXT
        assert field.validator_refs == ()
        assert field.is_visible_for({})

    def test_document_keys(self):
        field = FormFieldConfig.from_dict(
            {
                "id": "age",
                "fieldType": "number",
                "isRequired": True,
                "minValue": 18,
                "helperText": "In years",
                "validators": ["numeric"],
                "validationMessages": {"numeric": "Enter your age"},
            }
        )
        assert field.field_type is FieldType.NUMBER
        assert field.is_required is True
        assert field.min_value == 18
        assert field.helper_text == "In years"
        assert field.validator_refs == ("numeric",)
        assert field.validation_messages == {"numeric": "Enter your age"}

    def test_unknown_field_type_is_kept(self):
        field = FormFieldConfig.from_dict(
            {"id": "sig", "fieldType": "signature"}
        )
        assert field.field_type == "signature"
        assert field.field_type_name == "signature"
        assert not field.is_choice

    def test_single_validator_ref_is_wrapped(self):
        field = FormFieldConfig(id="email", validators="email")
        assert field.validator_refs == ("email",)

    def test_choice_field_requires_options(self):
        with pytest.raises(ValidationError, match="requires a non-empty"):
            FormFieldConfig(id="plan", field_type="select")

    def test_choice_field_with_options(self):
        field = FormFieldConfig(
            id="plan",
            field_type=FieldType.RADIO,
            options=[{"value": "free"}, {"value": "pro", "label": "Pro"}],
        )
        assert field.is_choice
        assert field.option_values == ["free", "pro"]
        assert field.options[0].label == "free"

    def test_length_bounds_are_ordered(self):
        with pytest.raises(ValidationError, match="min_length"):
            FormFieldConfig(id="name", min_length=5, max_length=2)

    def test_value_bounds_are_ordered(self):
        with pytest.raises(ValidationError, match="min_value"):
            FormFieldConfig(id="age", min_value=10, max_value=1)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            FormFieldConfig(id="")

    def test_is_frozen(self):
        field = FormFieldConfig(id="name")
        with pytest.raises(ValidationError):
            field.label = "Name"

    def test_copy_with(self):
        field = FormFieldConfig(id="name")
        changed = field.copy_with(label="Full name", isRequired=True)
        assert changed.label == "Full name"
        assert changed.is_required is True
        assert field.label == "name"
        assert field.is_required is False

    def test_copy_with_unknown_attribute(self):
        with pytest.raises(ValueError, match="Unknown field attribute"):
            FormFieldConfig(id="name").copy_with(colour="red")

    def test_copy_with_revalidates(self):
        with pytest.raises(ValidationError):
            FormFieldConfig(id="plan").copy_with(field_type="select")

    def test_to_dict_uses_document_keys(self):
        data = FormFieldConfig(
            id="email",
            field_type=FieldType.EMAIL,
            is_required=True,
            validators=["email"],
        ).to_dict()
        assert data["fieldType"] == "email"
        assert data["isRequired"] is True
        assert list(data["validators"]) == ["email"]
        assert "placeholder" not in data

    def test_document_round_trip(self):
        field = FormFieldConfig(
            id="plan",
            field_type=FieldType.SELECT,
            options=[{"value": "free"}],
            visibility_condition={"dependsOn": "type", "value": "business"},
            validators=["enum", {"name": "required"}],
        )
        again = FormFieldConfig.from_dict(field.to_dict())
        assert again.to_dict() == field.to_dict()
        assert again.visibility_condition == field.visibility_condition


class TestVisibility:

    def test_declarative_condition(self):
        field = FormFieldConfig.from_dict(
            {
                "id": "company",
                "visibilityCondition": {
                    "dependsOn": "type",
                    "value": "business",
                },
            }
        )
        assert isinstance(field.visibility_condition, VisibilityCondition)
        assert field.is_visible_for({"type": "business"})
        assert not field.is_visible_for({"type": "personal"})

    def test_callable_condition(self):
        field = FormFieldConfig(
            id="vat",
            visibility_condition=lambda values: values.get("country") == "DE",
        )
        assert field.is_visible_for({"country": "DE"})
        assert not field.is_visible_for({})

    def test_statically_hidden(self):
        field = FormFieldConfig(id="internal", is_visible=False)
        assert not field.is_visible_for({})


class TestFormSection:

    def test_carried_fields_join_field_ids(self):
        section = FormSection(
            id="contact",
            field_ids=["phone"],
            fields=[FormFieldConfig(id="email"), FormFieldConfig(id="phone")],
        )
        assert section.field_ids == ("phone", "email")

    def test_reference_only(self):
        section = FormSection.from_dict(
            {"id": "s", "title": "Details", "fieldIds": ["a", "b"]}
        )
        assert section.field_ids == ("a", "b")
        assert section.fields == ()
