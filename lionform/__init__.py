# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import logging

from ._errors import (
    DuplicateFieldError,
    DuplicateFieldIdError,
    FormDefinitionError,
    FormError,
    InvalidDeclarationError,
    UnknownValidatorError,
    ValidationCancelled,
    ValidatorConfigError,
)
from .config import FormSettings, settings
from .form import (
    DynamicFormBuilder,
    FieldState,
    FormBuilder,
    FormController,
    FormStatus,
)
from .models import (
    FieldType,
    FormBuilderConfig,
    FormFieldConfig,
    FormFieldOption,
    FormSection,
    SubmissionSettings,
    VisibilityCondition,
)
from .validation import (
    CancelSignal,
    ValidationContext,
    ValidationResult,
    Validator,
    ValidatorRegistry,
)
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

__all__ = (
    "CancelSignal",
    "DuplicateFieldError",
    "DuplicateFieldIdError",
    "DynamicFormBuilder",
    "FieldState",
    "FieldType",
    "FormBuilder",
    "FormBuilderConfig",
    "FormController",
    "FormDefinitionError",
    "FormError",
    "FormFieldConfig",
    "FormFieldOption",
    "FormSection",
    "FormSettings",
    "FormStatus",
    "InvalidDeclarationError",
    "SubmissionSettings",
    "UnknownValidatorError",
    "ValidationCancelled",
    "ValidationContext",
    "ValidationResult",
    "Validator",
    "ValidatorConfigError",
    "ValidatorRegistry",
    "VisibilityCondition",
    "__version__",
    "logger",
    "settings",
)
