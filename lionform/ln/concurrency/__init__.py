# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from .patterns import bounded_map, gather
from .utils import maybe_await

__all__ = ("bounded_map", "gather", "maybe_await")
