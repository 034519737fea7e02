# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from .base import MessageOverride, Validator, display_name
from .combinators import (
    AndValidator,
    AsyncValidator,
    ChainValidator,
    ConditionalValidator,
    CustomValidator,
    NotValidator,
    OrValidator,
    all_of,
    any_of,
    chain,
    custom,
    negate,
    when,
)
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
from .registry import (
    BUILTIN_VALIDATORS,
    ValidatorFactory,
    ValidatorRegistry,
    default_registry,
    normalize_name,
    parse_ref,
)
from .result import CancelSignal, ValidationContext, ValidationResult

__all__ = (
    "AndValidator",
    "AsyncValidator",
    "BUILTIN_VALIDATORS",
    "CancelSignal",
    "ChainValidator",
    "ConditionalValidator",
    "CustomValidator",
    "EmailValidator",
    "EnumValidator",
    "GreaterThanValidator",
    "LengthValidator",
    "LessThanValidator",
    "MatchValidator",
    "MessageOverride",
    "NotValidator",
    "NumericValidator",
    "OrValidator",
    "PatternValidator",
    "PhoneValidator",
    "RequiredValidator",
    "UrlValidator",
    "ValidationContext",
    "ValidationResult",
    "Validator",
    "ValidatorFactory",
    "ValidatorRegistry",
    "all_of",
    "any_of",
    "chain",
    "custom",
    "default_registry",
    "display_name",
    "negate",
    "normalize_name",
    "parse_ref",
    "to_number",
    "when",
)
