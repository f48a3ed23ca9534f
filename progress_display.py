#!filepath: progress_display.py
from typing import Optional

from tqdm import tqdm

from recorder import StatusSnapshot

class TqdmStatusDisplay:
    """
    Renders recorder progress with tqdm. The bar counts seconds of recorded
    media; when a maximum duration is known it becomes a full progress bar,
    otherwise an open-ended counter. Frames, size and bitrate go in the postfix.
    """
    def __init__(self, max_duration: Optional[float] = None, description: str = "Recording"):
        """
        Initializes the tqdm bar.

        Args:
            max_duration (float): Planned recording length in seconds, if any.
            description (str): A short description for the bar.
        """
        self.tqdm_bar = tqdm(
            total=round(max_duration) if max_duration else None,
            unit='s',
            desc=description,
            ncols=100,
            leave=True,
        )
        self._shown_seconds = 0.0

    def update(self, status: StatusSnapshot):
        """
        Moves the bar to the status' media duration and refreshes the postfix.
        Meant to be registered as the recorder's on_progress callback.
        """
        advance = status.duration - self._shown_seconds
        if advance > 0:
            self.tqdm_bar.update(round(advance, 2))
            self._shown_seconds = status.duration
        self.tqdm_bar.set_postfix(
            frames=status.frames,
            fps=f"{status.fps:.1f}",
            size=format_size(status.size),
            bitrate=f"{status.bitrate:.0f}k",
            refresh=False,
        )

    def finish(self):
        """Closes and cleans up the bar."""
        self.tqdm_bar.close()


def format_size(size: int) -> str:
    """Formats a byte count as B/KiB/MiB/GiB."""
    value = float(size)
    for unit in ('B', 'KiB', 'MiB'):
        if value < 1024:
            return f"{value:.0f}{unit}" if unit == 'B' else f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.2f}GiB"
