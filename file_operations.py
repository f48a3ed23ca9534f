#!filepath: file_operations.py
import os
import platform
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

RESERVED_CHARS = {
    'windows': r'<>:"/\|?*',
    'darwin': ':/',
    'linux': '/',
}
MAX_FILENAME = 200

class CrossPlatformFileOps:
    """
    Handles the file system questions of the CLI (where recordings go, what
    they are called, where ffmpeg lives) in a way that works on Windows,
    macOS, and Linux.
    """
    def __init__(self):
        self.system = platform.system().lower()

    def get_temp_dir(self) -> str:
        """Gets the directory used for FFmpeg diagnostic logs."""
        log_dir = os.path.join(tempfile.gettempdir(), "screencast_logs")
        os.makedirs(log_dir, exist_ok=True)
        return log_dir

    def get_recordings_dir(self) -> str:
        """
        Creates and returns the 'Screencasts' directory inside the user's
        Videos folder (Movies on macOS).
        """
        home = Path.home()
        videos_dir = home / ("Movies" if self.system == 'darwin' else "Videos")
        recordings_dir = videos_dir / "Screencasts"
        recordings_dir.mkdir(parents=True, exist_ok=True)
        return str(recordings_dir)

    def default_filename(self, extension: str = ".mp4") -> str:
        """A timestamped name such as 'screencast_2024-05-01_14-03-22.mp4'."""
        return f"screencast_{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}{extension}"

    def safe_filename(self, filename: str) -> str:
        """
        Makes a user-supplied recording name usable on the current OS:
        reserved characters and control characters become '_', Windows loses
        trailing dots and spaces, and the name is capped at MAX_FILENAME chars
        with the extension kept.
        """
        reserved = RESERVED_CHARS.get(self.system, '/')
        cleaned = ''.join('_' if ch in reserved or ord(ch) < 32 else ch for ch in filename)
        if self.system == 'windows':
            cleaned = cleaned.rstrip('. ') or '_'

        if len(cleaned) > MAX_FILENAME:
            stem, ext = os.path.splitext(cleaned)
            cleaned = stem[:MAX_FILENAME - len(ext)] + ext
        return cleaned

    def resolve_output_path(self, output: Optional[str]) -> str:
        """
        Bare filenames land in the recordings directory; anything with a
        directory component (or a URL) is used as given.
        """
        if not output:
            return os.path.join(self.get_recordings_dir(), self.default_filename())
        if '://' in output or os.path.dirname(output):
            return output
        return os.path.join(self.get_recordings_dir(), self.safe_filename(output))

    def get_executable_path(self, executable: str) -> Optional[str]:
        """
        Finds the full path to an executable (like ffmpeg) in the system's PATH.
        Automatically adds '.exe' on Windows.
        """
        if self.system == 'windows' and not executable.endswith('.exe'):
            executable += '.exe'

        return shutil.which(executable)
