# recorder/recorder.py
import asyncio
import logging
import time
from typing import Any, Callable, List, Optional

from .builder import RecordingConfig
from .command import build_args, to_command
from .config import RecorderConfig
from .events import StatusSnapshot
from .supervisor import ProcessSupervisor


class Recorder(RecordingConfig):
    """
    The public entry point: a fluent recording configuration plus the
    supervisor that runs it.

        rec = (Recorder()
               .input_video(device='x11grab', source=':0.0', framerate=60)
               .input_audio(device='pulse', source='default')
               .apply_preset('youtube_1080p')
               .output('out.mp4'))
        rec.on_progress(lambda status: print(status.duration))
        rec.start()
        while rec.update().running:
            time.sleep(0.5)
    """
    def __init__(self, config: Optional[RecorderConfig] = None):
        super().__init__()
        self.config = config or RecorderConfig()
        self.supervisor = ProcessSupervisor(self.config)

    # --- Command preview ---
    def build_args(self) -> List[str]:
        return build_args(self, self.config.ffmpeg_path)

    def to_command(self) -> str:
        return to_command(self, self.config.ffmpeg_path)

    def get_command(self) -> str:
        """The command of the last launch, or a preview if nothing was launched yet."""
        return self.supervisor.last_command or self.to_command()

    # --- Lifecycle ---
    def start(self) -> StatusSnapshot:
        return self.supervisor.start(self.build_args())

    def stop(self) -> StatusSnapshot:
        return self.supervisor.stop()

    def pause(self):
        return self.supervisor.pause()

    def resume(self):
        return self.supervisor.resume()

    def update(self) -> StatusSnapshot:
        return self.supervisor.update()

    def join(self, timeout: Optional[float] = None) -> bool:
        return self.supervisor.join(timeout)

    def get_status(self) -> StatusSnapshot:
        return self.supervisor.get_status()

    def get_stderr(self) -> str:
        return self.supervisor.get_stderr()

    @property
    def running(self) -> bool:
        return self.supervisor.running

    async def monitor(self, poll_interval: Optional[float] = None, max_duration: Optional[float] = None) -> StatusSnapshot:
        """
        Ticks update() until the session ends. With `max_duration` (wall-clock
        seconds) the recording is stopped once that much time has passed.
        """
        interval = poll_interval or self.config.poll_interval
        started = time.monotonic()
        while self.running:
            self.update()
            if not self.running:
                break
            if max_duration is not None and time.monotonic() - started >= max_duration:
                logging.info(f"Maximum duration of {max_duration}s reached, stopping.")
                self.stop()
                break
            await asyncio.sleep(interval)
        return self.get_status()

    # --- Callbacks ---
    def on_start(self, callback: Callable[[], Any]) -> 'Recorder':
        self.supervisor.events.register('on_start', callback)
        return self

    def on_stop(self, callback: Callable[[], Any]) -> 'Recorder':
        self.supervisor.events.register('on_stop', callback)
        return self

    def on_error(self, callback: Callable[[Exception], Any]) -> 'Recorder':
        self.supervisor.events.register('on_error', callback)
        return self

    def on_progress(self, callback: Callable[[StatusSnapshot], Any]) -> 'Recorder':
        self.supervisor.events.register('on_progress', callback)
        return self
