import sys
import time

import pytest

from recorder import RecorderConfig

PROGRESS_LINE = "frame={frames:5d} fps= 30 q=28.0 size={kb:8d}kB time=00:00:{secs:05.2f} bitrate=6000.0kbits/s speed=1.00x"


def python_command(*statements: str):
    """An argv that runs a small Python script standing in for ffmpeg."""
    script = "import sys, time\n" + "\n".join(statements)
    return [sys.executable, "-c", script]


def write_stderr(text: str) -> str:
    return f"sys.stderr.write({text!r}); sys.stderr.flush()"


def progress_line(frames: int, kb: int, secs: float, end: str = "\r") -> str:
    return PROGRESS_LINE.format(frames=frames, kb=kb, secs=secs) + end


def wait_until(predicate, timeout: float = 10.0, interval: float = 0.02) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def config(tmp_path) -> RecorderConfig:
    """A supervisor config that writes logs to tmp_path and skips the startup grace wait."""
    return RecorderConfig(log_dir=str(tmp_path / "logs"), grace_period=0, poll_interval=0.05)
