"""Tests for remotestorage.protocols.generic.emitter module."""

from enum import Enum
from unittest.mock import MagicMock

import pytest

from remotestorage._errors import ArgumentError, UnknownEventError
from remotestorage.protocols.generic import EventEmitter


class SampleEvent(str, Enum):
    CHANGE = "change"
    ERROR = "error"


@pytest.fixture
def events():
    return EventEmitter(SampleEvent)


class TestEventEmitter:
    """Test suite for EventEmitter class."""

    def test_emit_calls_handlers_in_order(self, events):
        calls = []
        events.on("change", lambda *args: calls.append(("first", args)))
        events.on(SampleEvent.CHANGE, lambda *args: calls.append(("second", args)))

        events.emit("change", 1, "two")

        assert calls == [("first", (1, "two")), ("second", (1, "two"))]

    def test_emit_only_reaches_matching_event(self, events):
        handler = MagicMock()
        events.on("error", handler)

        events.emit("change")

        handler.assert_not_called()

    def test_unknown_event_rejected_everywhere(self, events):
        with pytest.raises(UnknownEventError):
            events.on("connected", lambda: None)
        with pytest.raises(UnknownEventError):
            events.once("connected", lambda: None)
        with pytest.raises(UnknownEventError, match="Unknown event: connected"):
            events.emit("connected")

    def test_unknown_event_is_an_argument_error(self, events):
        with pytest.raises(ArgumentError):
            events.emit("nope")

    def test_non_callable_handler_rejected(self, events):
        with pytest.raises(ArgumentError, match="Expected function as handler"):
            events.on("change", "not a function")

    def test_once_fires_a_single_time(self, events):
        handler = MagicMock()
        events.once("change", handler)

        events.emit("change", "a")
        events.emit("change", "b")

        handler.assert_called_once_with("a")

    def test_once_leaves_other_handlers_in_place(self, events):
        calls = []
        events.on("change", lambda: calls.append("before"))
        events.once("change", lambda: calls.append("once"))
        events.on("change", lambda: calls.append("after"))

        events.emit("change")
        events.emit("change")

        assert calls == ["before", "once", "after", "before", "after"]
        assert events.listener_count("change") == 2

    def test_off_clears_handler(self, events):
        handler = MagicMock()
        events.on("change", handler)
        events.off("change", handler)

        events.emit("change")

        handler.assert_not_called()
        assert events.listener_count("change") == 0

    def test_off_clears_once_handler(self, events):
        handler = MagicMock()
        events.once("change", handler)
        events.off("change", handler)

        events.emit("change")

        handler.assert_not_called()
        assert events.listener_count("change") == 0

    def test_off_clears_first_matching_slot_only(self, events):
        handler = MagicMock()
        events.once("change", handler)
        events.on("change", handler)
        events.off("change", handler)

        events.emit("change", "a")
        events.emit("change", "b")

        assert [c.args for c in handler.call_args_list] == [("a",), ("b",)]

    def test_reset_keeps_vocabulary(self, events):
        handler = MagicMock()
        events.on("change", handler)

        events.reset()
        events.emit("change")

        handler.assert_not_called()
        events.on("error", handler)
        events.emit("error", "boom")
        handler.assert_called_once_with("boom")

    def test_once_registered_before_reset_does_not_touch_new_handlers(self, events):
        stale = MagicMock()
        events.once("change", stale)
        events.reset()
        fresh = MagicMock()
        events.on("change", fresh)

        events.emit("change")
        events.emit("change")

        stale.assert_not_called()
        assert fresh.call_count == 2

    def test_names_build_vocabulary(self):
        events = EventEmitter(["connected", "error"])
        handler = MagicMock()
        events.on("connected", handler)

        events.emit("connected")

        handler.assert_called_once_with()
        assert {kind.value for kind in events.kinds} == {"connected", "error"}

    def test_handler_exception_propagates(self, events):
        def explode():
            raise RuntimeError("handler failed")

        events.on("change", explode)
        with pytest.raises(RuntimeError, match="handler failed"):
            events.emit("change")
