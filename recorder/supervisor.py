# recorder/supervisor.py
import logging
import os
import shlex
import subprocess
import tempfile
import time
from dataclasses import dataclass
from typing import List, Optional

from .config import RecorderConfig
from .errors import (
    AlreadyRunningError, NotRunningError, LaunchError, UnsupportedError,
    StreamReadError, ProcessExitError,
)
from .events import EventDispatcher, StatusSnapshot, StatusTracker, SupervisorState
from .progress import ProgressParser


@dataclass
class ProcessHandle:
    """Everything owned by one running FFmpeg process."""
    process: subprocess.Popen
    pid: Optional[int]
    command: List[str]
    log_path: str
    parser: ProgressParser


class ProcessSupervisor:
    """
    Owns the lifecycle of one external FFmpeg process at a time.

    idle -> starting -> running -> stopping -> idle, with errored reachable from
    starting and running. Progress is caller driven: every update() reads the
    diagnostic bytes written since the last call and fires the callbacks.

    stop() only sends the signal and returns. The process may still be flushing
    its output file afterwards; use join() to wait for it.
    """
    def __init__(self, config: Optional[RecorderConfig] = None):
        self.config = config or RecorderConfig()
        self.events = EventDispatcher()
        self.status = StatusTracker()
        self.state = SupervisorState.IDLE
        self.last_command: Optional[str] = None
        self._handle: Optional[ProcessHandle] = None
        self._last_log_path: Optional[str] = None
        self._stopped_processes: List[subprocess.Popen] = []

    @property
    def running(self) -> bool:
        return self.state == SupervisorState.RUNNING and self._handle is not None

    @property
    def pid(self) -> Optional[int]:
        return self._handle.pid if self._handle else None

    def _set_state(self, state: SupervisorState, **changes) -> StatusSnapshot:
        logging.debug(f"Supervisor state: {self.state.value} -> {state.value}")
        self.state = state
        return self.status.update(state=state, **changes)

    def _new_log_path(self) -> str:
        log_dir = self.config.log_dir or tempfile.gettempdir()
        os.makedirs(log_dir, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix='ffmpeg_', suffix='.log', dir=log_dir)
        os.close(fd)
        return path

    def _stderr_tail(self, log_path: str) -> str:
        try:
            with open(log_path, 'r', encoding='utf-8', errors='replace') as f:
                lines = [line.strip() for line in f.read().replace('\r', '\n').split('\n') if line.strip()]
        except OSError:
            return ''
        return '\n'.join(lines[-self.config.stderr_tail_lines:])

    # --- Lifecycle ---
    def start(self, command: List[str]) -> StatusSnapshot:
        """Launches the given argv. Raises AlreadyRunningError or LaunchError."""
        if self.state in (SupervisorState.RUNNING, SupervisorState.STARTING, SupervisorState.STOPPING):
            raise AlreadyRunningError("Recorder is already running")

        self._reap()
        command_line = shlex.join(command)
        self.last_command = command_line
        try:
            log_path = self._new_log_path()
        except OSError as e:
            self._set_state(SupervisorState.IDLE, running=False)
            logging.error(f"Cannot create the FFmpeg diagnostic log: {e}")
            raise LaunchError(f"Cannot create diagnostic log in '{self.config.log_dir}': {e}.", command_line) from e
        self._last_log_path = log_path
        self._set_state(SupervisorState.STARTING)
        logging.info("Starting FFmpeg recording process...")
        logging.debug(f"FFmpeg command: {command_line}")

        try:
            with open(log_path, 'wb') as log_file:
                process = subprocess.Popen(
                    command, stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=log_file,
                    start_new_session=True, env=os.environ,
                )
        except (OSError, ValueError) as e:
            self._set_state(SupervisorState.IDLE, running=False)
            logging.error(f"Failed to spawn FFmpeg: {e}")
            raise LaunchError(f"Failed to start ffmpeg process: {e}.", command_line) from e

        handle = ProcessHandle(
            process=process, pid=process.pid, command=list(command),
            log_path=log_path, parser=ProgressParser(log_path),
        )

        if self.config.grace_period > 0:
            try:
                process.wait(timeout=self.config.grace_period)
            except subprocess.TimeoutExpired:
                pass
        if process.returncode is not None and process.returncode != 0:
            details = self._stderr_tail(log_path)
            message = f"FFmpeg exited with code {process.returncode} during startup."
            self._set_state(SupervisorState.ERRORED, running=False, error=details or message)
            logging.critical(message)
            for line in details.splitlines():
                logging.error(f"  {line}")
            raise LaunchError(message, command_line, details)

        self._handle = handle
        snapshot = self.status.reset(running=True, state=SupervisorState.RUNNING)
        self.state = SupervisorState.RUNNING
        logging.info(f"FFmpeg started (PID: {handle.pid}), diagnostics in {log_path}")
        self.events.emit('on_start')
        return snapshot

    def stop(self) -> StatusSnapshot:
        """Signals the process and returns immediately. Raises NotRunningError."""
        if not self.running:
            raise NotRunningError("Recorder is not running")

        handle = self._handle
        self._set_state(SupervisorState.STOPPING)
        self._signal(handle, self.config.stop_signal)
        self._stopped_processes.append(handle.process)
        self._handle = None
        snapshot = self._set_state(SupervisorState.IDLE, running=False)
        logging.info("Stop signal sent to FFmpeg.")
        self.events.emit('on_stop')
        return snapshot

    def _signal(self, handle: ProcessHandle, sig: int):
        if handle.pid is not None:
            try:
                os.kill(handle.pid, sig)
            except ProcessLookupError:
                logging.debug(f"Process {handle.pid} had already exited.")
            return

        # No PID: signal every process with the same executable name. This can
        # hit unrelated FFmpeg instances on the same host.
        name = os.path.basename(handle.command[0])
        logging.warning(f"No PID captured; falling back to 'pkill -{int(sig)} -x {name}'. Unrelated '{name}' processes will be signalled too.")
        try:
            subprocess.run(['pkill', f'-{int(sig)}', '-x', name], check=False,
                           stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except FileNotFoundError:
            logging.error("pkill is not available; the process could not be signalled.")

    def pause(self):
        raise UnsupportedError("Pause is not implemented")

    def resume(self):
        raise UnsupportedError("Resume is not implemented")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Waits for stopped processes to exit. Returns False if any is still alive."""
        deadline = None if timeout is None else time.monotonic() + timeout
        for process in list(self._stopped_processes):
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                process.wait(timeout=remaining)
            except subprocess.TimeoutExpired:
                return False
        self._reap()
        return True

    def _reap(self):
        self._stopped_processes = [p for p in self._stopped_processes if p.poll() is None]

    # --- Progress ---
    def update(self) -> StatusSnapshot:
        """Processes newly written diagnostics and detects process exit."""
        if not self.running:
            self._reap()
            return self.status.get()

        handle = self._handle
        returncode = handle.process.poll()
        try:
            fields = handle.parser.poll(final=returncode is not None)
        except StreamReadError as e:
            self.status.update(error=str(e))
            self.events.error(e)
            fields = {}

        if fields:
            snapshot = self.status.update(**fields)
            self.events.emit('on_progress', snapshot)

        # A callback may have stopped (or restarted) the session during this tick
        if returncode is not None and self._handle is handle:
            self._finish(handle, returncode)
        return self.status.get()

    def _finish(self, handle: ProcessHandle, returncode: int):
        self._handle = None
        if returncode == 0:
            logging.info("FFmpeg finished.")
            self._set_state(SupervisorState.IDLE, running=False)
        else:
            message = handle.parser.last_error_line or self._stderr_tail(handle.log_path) or 'no diagnostic output'
            error = ProcessExitError(returncode, message)
            logging.critical(f"FFmpeg exited unexpectedly with code {returncode}.")
            self._set_state(SupervisorState.ERRORED, running=False, error=str(error))
            self.events.error(error)
        self.events.emit('on_stop')

    def get_status(self) -> StatusSnapshot:
        return self.status.get()

    def get_stderr(self) -> str:
        """Returns the raw diagnostic output of the current or most recent process."""
        if not self._last_log_path:
            return ''
        try:
            with open(self._last_log_path, 'r', encoding='utf-8', errors='replace') as f:
                return f.read()
        except OSError as e:
            logging.warning(f"Could not read diagnostic log {self._last_log_path}: {e}")
            return ''
