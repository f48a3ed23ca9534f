import dataclasses
import logging

import pytest

from recorder import CallbackError, StatusSnapshot, SupervisorState
from recorder.events import EventDispatcher, StatusTracker


def test_snapshot_is_immutable():
    snapshot = StatusSnapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.frames = 10


def test_tracker_swaps_whole_snapshots():
    tracker = StatusTracker()
    before = tracker.get()
    after = tracker.update(frames=10, fps=29.97)

    assert before.frames == 0
    assert after is tracker.get()
    assert (after.frames, after.fps) == (10, 29.97)


def test_tracker_reset_drops_previous_session():
    tracker = StatusTracker()
    tracker.update(frames=500, error="old failure")
    snapshot = tracker.reset(running=True, state=SupervisorState.RUNNING)
    assert snapshot == StatusSnapshot(running=True, state=SupervisorState.RUNNING)


def test_register_replaces_previous_callback():
    dispatcher = EventDispatcher()
    calls = []
    dispatcher.register("on_stop", lambda: calls.append(1))
    dispatcher.register("on_stop", lambda: calls.append(2))
    dispatcher.emit("on_stop")
    assert calls == [2]


def test_unknown_slot_is_rejected():
    with pytest.raises(ValueError):
        EventDispatcher().register("on_pause", print)


def test_emit_without_subscriber_is_silent():
    EventDispatcher().emit("on_progress", StatusSnapshot())


def test_raising_callback_is_wrapped_and_sent_to_on_error():
    dispatcher = EventDispatcher()
    errors = []
    dispatcher.register("on_progress", lambda status: 1 / 0)
    dispatcher.register("on_error", errors.append)

    dispatcher.emit("on_progress", StatusSnapshot())

    assert isinstance(errors[0], CallbackError)
    assert errors[0].slot == "on_progress"
    assert isinstance(errors[0].original, ZeroDivisionError)


def test_raising_on_error_is_only_logged(caplog):
    dispatcher = EventDispatcher()

    def broken(error):
        raise RuntimeError("handler broke")

    dispatcher.register("on_error", broken)
    dispatcher.register("on_start", lambda: 1 / 0)
    with caplog.at_level(logging.ERROR):
        dispatcher.emit("on_start")
    assert "handler broke" in caplog.text


def test_error_without_subscriber_is_logged(caplog):
    from recorder import StreamReadError

    with caplog.at_level(logging.ERROR):
        EventDispatcher().error(StreamReadError("log vanished"))
    assert "log vanished" in caplog.text
