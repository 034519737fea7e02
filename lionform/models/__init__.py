# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from .field import (
    CHOICE_FIELD_TYPES,
    FieldType,
    FormFieldConfig,
    FormFieldOption,
    FormSection,
    ValidatorRef,
    VisibilityCondition,
    VisibilityPredicate,
)
from .form import FormBuilderConfig, SubmissionSettings

__all__ = (
    "CHOICE_FIELD_TYPES",
    "FieldType",
    "FormBuilderConfig",
    "FormFieldConfig",
    "FormFieldOption",
    "FormSection",
    "SubmissionSettings",
    "ValidatorRef",
    "VisibilityCondition",
    "VisibilityPredicate",
)
