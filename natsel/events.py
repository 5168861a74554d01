"""Synchronous event emitters used for engine notifications."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from natsel.errors import InvariantError


class Emitter:
    """A list of listeners notified synchronously, in registration order."""

    def __init__(self, name: str = ""):
        self.name = name
        self._listeners: list[Callable[..., Any]] = []
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def add_listener(self, listener: Callable[..., Any]) -> None:
        if self._disposed:
            raise InvariantError(f"cannot add listener to disposed emitter {self.name!r}")
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[..., Any]) -> None:
        self._listeners.remove(listener)

    def has_listener(self, listener: Callable[..., Any]) -> bool:
        return listener in self._listeners

    def emit(self, *args: Any) -> None:
        """Notify all listeners.

        Iterates over a copy, so listeners may remove themselves.
        """
        if self._disposed:
            raise InvariantError(f"emit called on disposed emitter {self.name!r}")
        for listener in list(self._listeners):
            listener(*args)

    def dispose(self) -> None:
        self._listeners.clear()
        self._disposed = True
