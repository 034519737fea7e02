# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import anyio
import pytest

from lionform._errors import ValidationCancelled
from lionform.validation import (
    CancelSignal,
    ValidationContext,
    ValidationResult,
)


class TestValidationResult:

    def test_success(self):
        result = ValidationResult.success()
        assert result.is_valid
        assert result.error_message is None

    def test_failure(self):
        result = ValidationResult.failure("Bad", details={"n": 1})
        assert not result.is_valid
        assert result.error_message == "Bad"
        assert result.to_dict() == {
            "isValid": False,
            "errorMessage": "Bad",
            "details": {"n": 1},
        }

    def test_with_message_only_changes_failures(self):
        ok = ValidationResult.success()
        assert ok.with_message("ignored") is ok
        failed = ValidationResult.failure("Bad", details={"n": 1})
        renamed = failed.with_message("Worse")
        assert renamed.error_message == "Worse"
        assert renamed.details == {"n": 1}

    def test_immutable(self):
        result = ValidationResult.success()
        with pytest.raises(AttributeError):
            result.is_valid = False


class TestValidationContext:

    def test_values_are_a_snapshot(self):
        values = {"a": 1}
        context = ValidationContext(field_id="b", values=values)
        values["a"] = 2
        assert context.get_value("a") == 1
        with pytest.raises(TypeError):
            context.values["a"] = 3

    def test_has_value(self):
        context = ValidationContext(
            field_id="x", values={"a": 0, "b": None}
        )
        assert context.has_value("a")
        assert not context.has_value("b")
        assert not context.has_value("c")

    def test_display_name(self):
        assert ValidationContext(field_id="x").display_name == "x"
        assert (
            ValidationContext(field_id="x", label="Ex").display_name == "Ex"
        )


class TestCancelSignal:

    def test_raise_if_cancelled(self):
        signal = CancelSignal()
        signal.raise_if_cancelled()
        signal.cancel()
        assert signal.is_cancelled
        with pytest.raises(ValidationCancelled):
            signal.raise_if_cancelled()

    @pytest.mark.anyio
    async def test_wait_returns_once_cancelled(self, anyio_backend):
        signal = CancelSignal()
        with anyio.fail_after(1):
            async with anyio.create_task_group() as tg:
                tg.start_soon(signal.wait)
                await anyio.sleep(0.01)
                signal.cancel()

    @pytest.mark.anyio
    async def test_wait_after_cancel(self, anyio_backend):
        signal = CancelSignal()
        signal.cancel()
        with anyio.fail_after(1):
            await signal.wait()
