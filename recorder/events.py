# recorder/events.py
import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .errors import CallbackError, RecorderError


class SupervisorState(Enum):
    """Lifecycle states of a ProcessSupervisor."""
    IDLE, STARTING, RUNNING, STOPPING, ERRORED = "idle", "starting", "running", "stopping", "errored"


@dataclass(frozen=True)
class StatusSnapshot:
    """An immutable view of the recording status at one point in time."""
    running: bool = False
    state: SupervisorState = SupervisorState.IDLE
    frames: int = 0
    fps: float = 0.0
    size: int = 0          # bytes
    bitrate: float = 0.0   # kbits/s
    duration: float = 0.0  # seconds of media written
    speed: float = 0.0
    error: Optional[str] = None


class StatusTracker:
    """Holds the current snapshot and swaps it atomically on every change."""
    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = StatusSnapshot()

    def get(self) -> StatusSnapshot:
        with self._lock:
            return self._snapshot

    def update(self, **changes: Any) -> StatusSnapshot:
        with self._lock:
            self._snapshot = replace(self._snapshot, **changes)
            return self._snapshot

    def reset(self, **changes: Any) -> StatusSnapshot:
        """Starts from a fresh snapshot, keeping nothing from the previous session."""
        with self._lock:
            self._snapshot = replace(StatusSnapshot(), **changes)
            return self._snapshot


class EventDispatcher:
    """
    A fixed set of single-subscriber callback slots.

    Registering a callback replaces the previous one for that slot. Exceptions
    raised by a callback never escape emit(): they are wrapped in CallbackError
    and handed to the on_error slot.
    """
    SLOTS = ('on_start', 'on_stop', 'on_error', 'on_progress')

    def __init__(self):
        self._callbacks: Dict[str, Optional[Callable[..., Any]]] = {slot: None for slot in self.SLOTS}

    def register(self, slot: str, callback: Optional[Callable[..., Any]]):
        if slot not in self._callbacks:
            raise ValueError(f"Unknown callback slot '{slot}'. Valid: {', '.join(self.SLOTS)}")
        self._callbacks[slot] = callback

    def emit(self, slot: str, *args: Any):
        callback = self._callbacks[slot]
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            if slot == 'on_error':
                logging.error(f"The on_error callback itself raised: {e}")
                return
            logging.warning(f"Callback '{slot}' raised an exception: {e}")
            self.emit('on_error', CallbackError(slot, e))

    def error(self, error: RecorderError):
        """Reports an error to the on_error slot, logging it when nobody listens."""
        if self._callbacks['on_error'] is None:
            logging.error(str(error))
            return
        self.emit('on_error', error)
