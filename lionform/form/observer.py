# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from typing import Any

__all__ = ("ChangeNotifier", "Listener")

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class _StrongRef:
    __slots__ = ("_obj",)

    def __init__(self, obj: Listener):
        self._obj = obj

    def __call__(self) -> Listener:
        return self._obj


class ChangeNotifier:
    """Synchronous change listeners with weak references to bound methods.

    Bound methods are held through ``WeakMethod`` so a listener does not keep
    its owner (typically a view) alive; once the owner is collected the
    subscription disappears. Plain functions and lambdas are held strongly
    until unsubscribed.
    """

    def __init__(self) -> None:
        self._listeners: list[weakref.WeakMethod | _StrongRef] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        if not callable(listener):
            raise TypeError("Listener must be callable")

        if hasattr(listener, "__self__") and hasattr(listener, "__func__"):
            ref: weakref.WeakMethod | _StrongRef = weakref.WeakMethod(listener)
        else:
            ref = _StrongRef(listener)
        self._listeners.append(ref)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(ref)
            except ValueError:
                pass

        return unsubscribe

    def _live_listeners(self) -> list[Listener]:
        callbacks, alive = [], []
        for ref in self._listeners:
            if (cb := ref()) is not None:
                callbacks.append(cb)
                alive.append(ref)
        self._listeners[:] = alive
        return callbacks

    def notify(self, source: Any) -> None:
        """Call every live listener with ``source``.

        A failing listener is logged and does not stop the others.
        """
        for callback in self._live_listeners():
            try:
                callback(source)
            except Exception as e:
                logger.error(f"Error in change listener: {e}", exc_info=True)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._live_listeners())
