# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import inspect
from collections.abc import Callable
from typing import Any

__all__ = ("maybe_await",)


async def maybe_await(func: Callable[..., Any], *args, **kwargs) -> Any:
    """Call ``func`` and await the result if it is awaitable.

    Lets hosts pass plain functions wherever an async callback is accepted.
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
