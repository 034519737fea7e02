# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

__all__ = ("FormSettings", "settings")


class FormSettings(BaseSettings, frozen=True):
    """Runtime defaults for form controllers, overridable from the environment.

    Every field can be set with a ``LIONFORM_`` prefixed environment variable
    or from a ``.env`` file, e.g. ``LIONFORM_LIVE_VALIDATION=true``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIONFORM_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    live_validation: bool = Field(
        default=False,
        description="Validate a field whenever its value changes",
    )
    max_concurrent_validations: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on fields validated at once by validate_all",
    )
    async_validation_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Default timeout in seconds for AsyncValidator bodies",
    )

    internal_error_message: str = "Validation failed due to an internal error"
    validation_failed_message: str = "Form validation failed"
    submission_failed_message: str = "Submission failed"
    timeout_message: str = "Validation timed out"

    _instance: ClassVar[Any] = None

    def with_overrides(self, **kw: Any) -> Self:
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=kw)


settings = FormSettings()
FormSettings._instance = settings
