# recorder/progress.py
"""
Incremental parser for FFmpeg's diagnostic (stderr) stream.

FFmpeg rewrites one stats line per update, ending it with '\\r':

    frame=  123 fps= 30 q=28.0 size=    1024kB time=00:00:05.00 bitrate=1677.7kbits/s speed=1.00x

Only the newest such line in each read matters. Every field is parsed on its
own, so a missing or garbled token never hides the others.
"""
import logging
import re
from typing import Any, Dict, Optional

from .errors import StreamReadError

LINE_SPLIT_RE = re.compile(r'[\r\n]+')

FRAME_RE = re.compile(r'frame=\s*(\S+)')
FPS_RE = re.compile(r'fps=\s*(\S+)')
BITRATE_RE = re.compile(r'bitrate=\s*(\S+?)kbits/s')
SIZE_RE = re.compile(r'size=\s*(\S+?)(kB|KB|KiB|MB|MiB|GB|GiB|B)(?=\s|$)')
TIME_RE = re.compile(r'time=\s*(\S+)')
SPEED_RE = re.compile(r'speed=\s*(\S+?)x')
TIMESTAMP_RE = re.compile(r'^(\d+):(\d{2}):(\d{2}(?:\.\d+)?)$')

ERROR_LINE_RE = re.compile(
    r'error|invalid|failed|cannot|could not|no such file|permission denied|not found', re.IGNORECASE
)

SIZE_UNITS = {
    'B': 1,
    'kB': 1024, 'KB': 1024, 'KiB': 1024,
    'MB': 1024 ** 2, 'MiB': 1024 ** 2,
    'GB': 1024 ** 3, 'GiB': 1024 ** 3,
}


def is_progress_line(line: str) -> bool:
    return 'frame=' in line and 'time=' in line


def parse_timestamp(value: str) -> Optional[float]:
    """Converts HH:MM:SS.frac to seconds; None for N/A or anything malformed."""
    match = TIMESTAMP_RE.match(value)
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def _search(pattern: re.Pattern, line: str, convert) -> Optional[Any]:
    match = pattern.search(line)
    if not match:
        return None
    try:
        return convert(*match.groups())
    except (ValueError, TypeError):
        return None


def _size_in_bytes(number: str, unit: str) -> int:
    return int(number) * SIZE_UNITS[unit]


def parse_progress_line(line: str) -> Dict[str, Any]:
    """Extracts whichever of frames/fps/bitrate/size/duration/speed the line carries."""
    fields = {
        'frames': _search(FRAME_RE, line, int),
        'fps': _search(FPS_RE, line, float),
        'bitrate': _search(BITRATE_RE, line, float),
        'size': _search(SIZE_RE, line, _size_in_bytes),
        'duration': _search(TIME_RE, line, parse_timestamp),
        'speed': _search(SPEED_RE, line, float),
    }
    return {name: value for name, value in fields.items() if value is not None}


class ProgressParser:
    """
    Consumes a diagnostic log file from a byte-offset watermark.

    Each poll reads only the bytes appended since the previous poll. A trailing
    fragment without a line terminator is held back and completed by the next
    read, so a stats line split across two reads is still matched once.
    """
    def __init__(self, path: str):
        self.path = path
        self.watermark = 0
        self.last_error_line: Optional[str] = None
        self._pending = b''

    def read_new(self) -> bytes:
        """Returns the bytes appended since the watermark and advances it."""
        try:
            with open(self.path, 'rb') as f:
                f.seek(self.watermark)
                data = f.read()
        except OSError as e:
            raise StreamReadError(f"Cannot read diagnostic stream '{self.path}': {e}") from e
        self.watermark += len(data)
        return data

    def poll(self, final: bool = False) -> Dict[str, Any]:
        """Reads and parses new output. `final` flushes an unterminated last line."""
        return self.feed(self.read_new(), final=final)

    def feed(self, data: bytes, final: bool = False) -> Dict[str, Any]:
        """Parses a chunk of raw diagnostic bytes; returns the fields of the newest stats line."""
        data = self._pending + data
        if final:
            complete, self._pending = data, b''
        else:
            cut = max(data.rfind(b'\r'), data.rfind(b'\n')) + 1
            complete, self._pending = data[:cut], data[cut:]

        latest: Optional[str] = None
        for line in LINE_SPLIT_RE.split(complete.decode('utf-8', errors='replace')):
            line = line.strip()
            if not line:
                continue
            if is_progress_line(line):
                latest = line
            elif ERROR_LINE_RE.search(line):
                self.last_error_line = line
                logging.debug(f"FFmpeg reported: {line}")

        if latest is None:
            return {}
        return parse_progress_line(latest)
