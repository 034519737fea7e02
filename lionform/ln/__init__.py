# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from ._json import json_dumps, load_json_mapping
from .concurrency import bounded_map, gather, maybe_await

__all__ = (
    "bounded_map",
    "gather",
    "json_dumps",
    "load_json_mapping",
    "maybe_await",
)
