# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from .builder import FormBuilder
from .controller import FormController, SubmitCallback
from .dynamic import DynamicFormBuilder
from .observer import ChangeNotifier, Listener
from .state import FieldState, FormStatus

__all__ = (
    "ChangeNotifier",
    "DynamicFormBuilder",
    "FieldState",
    "FormBuilder",
    "FormController",
    "FormStatus",
    "Listener",
    "SubmitCallback",
)
