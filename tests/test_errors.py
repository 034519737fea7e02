# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for lionform error classes."""

import pytest

from lionform._errors import (
    DuplicateFieldError,
    DuplicateFieldIdError,
    FormDefinitionError,
    FormError,
    InvalidDeclarationError,
    UnknownValidatorError,
    ValidationCancelled,
    ValidatorConfigError,
)


class TestFormError:
    """Tests for the base FormError class."""

    def test_default_initialization(self):
        error = FormError()
        assert str(error) == "Form error"
        assert error.message == "Form error"
        assert error.details == {}

    def test_custom_message_and_details(self):
        error = FormError("Broken", details={"key": "value"})
        assert str(error) == "Broken"
        assert error.details == {"key": "value"}

    def test_with_cause(self):
        cause = ValueError("Original error")
        error = FormError("Wrapped error", cause=cause)
        assert error.get_cause() is cause
        assert error.__cause__ is cause

    def test_to_dict(self):
        error = FormError("Test error", details={"field": "x"})
        assert error.to_dict() == {
            "error": "FormError",
            "message": "Test error",
            "details": {"field": "x"},
        }

    def test_to_dict_with_cause(self):
        error = FormError("Test error", cause=KeyError("k"))
        data = error.to_dict(include_cause=True)
        assert data["cause"] == repr(KeyError("k"))
        assert "cause" not in error.to_dict()


class TestDefinitionErrors:
    """Construction-time errors all derive from FormDefinitionError."""

    @pytest.mark.parametrize(
        "error",
        [
            DuplicateFieldError("email"),
            DuplicateFieldIdError("email", ["a", "b"]),
            UnknownValidatorError("email", "iban"),
            ValidatorConfigError("pattern", "zip", "missing pattern"),
            InvalidDeclarationError("bad"),
        ],
    )
    def test_hierarchy(self, error):
        assert isinstance(error, FormDefinitionError)
        assert isinstance(error, FormError)

    def test_duplicate_field(self):
        error = DuplicateFieldError("email", form_id="signup")
        assert error.field_id == "email"
        assert str(error) == (
            "Field 'email' is already registered in form 'signup'"
        )
        assert error.details == {"field_id": "email", "form_id": "signup"}

    def test_duplicate_field_id_names_both_forms(self):
        error = DuplicateFieldIdError("email", ["contact", "billing"])
        assert error.field_id == "email"
        assert error.form_ids == ["contact", "billing"]
        assert "contact, billing" in str(error)

    def test_unknown_validator(self):
        error = UnknownValidatorError("iban_field", "iban")
        assert error.field_id == "iban_field"
        assert error.validator_name == "iban"
        assert str(error) == "Unknown validator 'iban' on field 'iban_field'"

    def test_validator_config_keeps_cause(self):
        cause = ValueError("no bounds")
        error = ValidatorConfigError(
            "length", "name", "no bounds", cause=cause
        )
        assert error.get_cause() is cause
        assert error.details["validator_name"] == "length"


def test_validation_cancelled_is_not_a_definition_error():
    error = ValidationCancelled()
    assert isinstance(error, FormError)
    assert not isinstance(error, FormDefinitionError)
    assert error.message == "Validation cancelled"
