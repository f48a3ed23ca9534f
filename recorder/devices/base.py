# recorder/devices/base.py
import logging, platform, subprocess
from typing import List, Optional
from ..interfaces import Device, DeviceCapabilities
from ..errors import DeviceDiscoveryError

class BaseDiscoverer:
    """Base class providing common utilities for discoverers."""
    kind = 'video'

    def __init__(self):
        self.system = platform.system().lower()

    def run_subprocess(self, command: List[str], check: bool = True, stderr: bool = False) -> str:
        """Runs a probe command and returns its stdout (or stderr, for FFmpeg's listings)."""
        try:
            kwargs = {'stdout': subprocess.PIPE, 'stderr': subprocess.PIPE, 'text': True, 'encoding': 'utf-8', 'errors': 'replace'}
            result = subprocess.run(command, **kwargs, check=check, timeout=10)
            return result.stderr if stderr else result.stdout
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            raise DeviceDiscoveryError(f"Command '{command[0]}' failed: {e}") from e

    def discover(self) -> List[Device]:
        return []

    def capabilities(self, device_id: str) -> Optional[DeviceCapabilities]:
        logging.debug(f"{self.__class__.__name__} cannot report capabilities for '{device_id}'.")
        return None
