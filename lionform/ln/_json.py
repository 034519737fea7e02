# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Mapping
from typing import Any

import orjson

__all__ = ("load_json_mapping", "json_dumps", "MAX_JSON_INPUT_SIZE")

# Form documents are small; anything larger is almost certainly a mistake.
MAX_JSON_INPUT_SIZE = 10 * 1024 * 1024  # 10 MB


def load_json_mapping(
    data: str | bytes | bytearray | Mapping[str, Any],
    /,
    *,
    max_size: int = MAX_JSON_INPUT_SIZE,
) -> dict[str, Any]:
    """Return ``data`` as a dict, parsing it with orjson when it is text.

    Raises:
        TypeError: If the input is neither text nor a mapping, or the parsed
            document is not a JSON object.
        ValueError: If the input is empty, too large or not valid JSON.
    """
    if isinstance(data, Mapping):
        return dict(data)
    if not isinstance(data, (str, bytes, bytearray)):
        raise TypeError(
            f"Expected a mapping or JSON text, got {type(data).__name__}"
        )
    if not data.strip():
        raise ValueError("Input JSON document is empty")
    size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
    if size > max_size:
        raise ValueError(
            f"Input size ({size} bytes) exceeds maximum allowed size "
            f"({max_size} bytes)"
        )

    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON document: {e}") from e

    if not isinstance(parsed, dict):
        raise TypeError(
            f"Expected a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def json_dumps(obj: Any, /, *, pretty: bool = False) -> str:
    option = orjson.OPT_NON_STR_KEYS
    if pretty:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, default=str, option=option).decode("utf-8")
