"""Tests for the synchronous event emitter."""

from __future__ import annotations

import pytest

from natsel.errors import InvariantError
from natsel.events import Emitter


class TestEmitter:
    """Test listener registration and notification."""

    def test_listeners_called_in_order(self):
        emitter = Emitter("test")
        calls = []
        emitter.add_listener(lambda value: calls.append(("first", value)))
        emitter.add_listener(lambda value: calls.append(("second", value)))

        emitter.emit(3)

        assert calls == [("first", 3), ("second", 3)]

    def test_remove_listener(self):
        emitter = Emitter()
        calls = []

        def listener():
            calls.append(True)

        emitter.add_listener(listener)
        assert emitter.has_listener(listener)
        emitter.remove_listener(listener)
        emitter.emit()

        assert calls == []
        assert not emitter.has_listener(listener)

    def test_listener_may_remove_itself(self):
        emitter = Emitter()
        calls = []

        def once():
            calls.append("once")
            emitter.remove_listener(once)

        emitter.add_listener(once)
        emitter.add_listener(lambda: calls.append("always"))

        emitter.emit()
        emitter.emit()

        assert calls == ["once", "always", "always"]

    def test_disposed_emitter(self):
        emitter = Emitter("gone")
        emitter.add_listener(lambda: None)
        emitter.dispose()

        assert emitter.is_disposed
        with pytest.raises(InvariantError):
            emitter.emit()
        with pytest.raises(InvariantError):
            emitter.add_listener(lambda: None)
