# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .._errors import InvalidDeclarationError
from ..ln import load_json_mapping
from ..models.form import FormBuilderConfig
from ..validation.base import Validator
from ..validation.registry import ValidatorRegistry, default_registry
from .controller import FormController

__all__ = ("FormBuilder",)

logger = logging.getLogger(__name__)

Declaration = Mapping[str, Any] | str | bytes


class FormBuilder:
    """Turns declarative form documents into configs and live controllers.

    Validator references are resolved against ``registry``; register custom
    validators there before parsing documents that use them.

    Example::

        builder = FormBuilder()
        form = builder.build({
            "formId": "signup",
            "fields": [
                {"id": "email", "fieldType": "email", "isRequired": True,
                 "validators": ["email"]},
            ],
        })
    """

    def __init__(self, registry: ValidatorRegistry | None = None):
        self.registry = (
            registry if registry is not None else default_registry()
        )

    def from_declaration(self, doc: Declaration) -> FormBuilderConfig:
        """Parse and check a form document.

        Every validator reference is resolved here, so a document naming an
        unknown validator is rejected before any controller exists.

        Raises:
            InvalidDeclarationError: If the document is malformed.
            DuplicateFieldError: If two fields share an id.
            UnknownValidatorError: If a field names an unregistered validator.
            ValidatorConfigError: If a validator lacks required parameters.
        """
        if isinstance(doc, (str, bytes, bytearray)):
            try:
                doc = load_json_mapping(doc)
            except (TypeError, ValueError) as e:
                raise InvalidDeclarationError(
                    f"Form declaration is not a valid JSON object: {e}",
                    cause=e,
                ) from e
        if not isinstance(doc, Mapping):
            raise InvalidDeclarationError(
                "Form declaration must be a mapping, "
                f"got {type(doc).__name__}"
            )

        try:
            config = FormBuilderConfig.model_validate(doc)
        except ValidationError as e:
            form_id = doc.get("formId") or doc.get("form_id") or "<unknown>"
            raise InvalidDeclarationError(
                f"Invalid declaration for form '{form_id}': "
                f"{e.error_count()} error(s)",
                details={"errors": e.errors(include_url=False)},
                cause=e,
            ) from e

        self.resolve_validators(config)
        logger.debug(
            "Parsed form '%s' with %d field(s)",
            config.form_id,
            len(config.fields),
        )
        return config

    def resolve_validators(
        self, config: FormBuilderConfig
    ) -> dict[str, list[Validator]]:
        """Resolve the validators of every field of ``config``."""
        return {
            field.id: self.registry.resolve_field(field)
            for field in config.fields
        }

    def build_controller(
        self, config: FormBuilderConfig, **controller_kwargs: Any
    ) -> FormController:
        """Create a controller with every field of ``config`` registered."""
        controller_kwargs.setdefault("submission", config.submission)
        controller = FormController(config.form_id, **controller_kwargs)

        controller.register_fields(
            config.fields, self.resolve_validators(config)
        )
        return controller

    def build(
        self, doc: Declaration, **controller_kwargs: Any
    ) -> FormController:
        """Parse ``doc`` and build its controller in one step."""
        return self.build_controller(
            self.from_declaration(doc), **controller_kwargs
        )

