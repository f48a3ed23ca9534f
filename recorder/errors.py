# recorder/errors.py
from typing import Optional


class RecorderError(Exception):
    """Base exception for all errors in this package."""
    pass


class AlreadyRunningError(RecorderError):
    """Raised when start() is called while a recording session is active."""
    pass


class NotRunningError(RecorderError):
    """Raised when stop() is called without an active recording session."""
    pass


class UnsupportedError(RecorderError):
    """Raised by operations that are reserved but not implemented (pause/resume)."""
    pass


class LaunchError(RecorderError):
    """Raised when the FFmpeg process could not be spawned or died during startup."""
    def __init__(self, message: str, command: str, details: Optional[str] = None):
        text = f"{message} Command: {command}"
        if details:
            text += f"\n{details}"
        super().__init__(text)
        self.command = command
        self.details = details


class CallbackError(RecorderError):
    """Wraps an exception raised by a user callback."""
    def __init__(self, slot: str, original: BaseException):
        super().__init__(f"Callback '{slot}' raised {original.__class__.__name__}: {original}")
        self.slot = slot
        self.original = original


class StreamReadError(RecorderError):
    """Raised when the diagnostic stream of a running process cannot be read."""
    pass


class ProcessExitError(RecorderError):
    """Reported when the FFmpeg process exits on its own with a non-zero code."""
    def __init__(self, returncode: int, message: str):
        super().__init__(f"FFmpeg exited with code {returncode}: {message}")
        self.returncode = returncode


class DeviceDiscoveryError(RecorderError):
    """Raised when there's an error probing the system for capture devices."""
    pass
