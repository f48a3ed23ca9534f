# recorder/devices/__init__.py
import logging
from typing import Dict, List, Optional

from ..caching import DeviceCache
from ..config import RecorderConfig
from ..interfaces import Device, DeviceCapabilities, Discoverer
from .x11 import X11Discoverer
from .v4l2 import V4l2Discoverer
from .pulse import PulseDiscoverer
from .alsa import AlsaDiscoverer

DEVICE_KINDS = ('video', 'audio')


class DeviceService:
    """
    Orchestrates the platform discoverers to enumerate capture devices.
    Results are cached per kind; a failing discoverer is logged and skipped.
    """
    def __init__(self, config: Optional[RecorderConfig] = None):
        self.config = config or RecorderConfig()
        self.cache = DeviceCache(self.config.device_cache_seconds)
        # The order here is the order devices are listed in.
        self._discoverers: Dict[str, List[Discoverer]] = {
            'video': [X11Discoverer(), V4l2Discoverer(self.config.ffmpeg_path)],
            'audio': [PulseDiscoverer(), AlsaDiscoverer()],
        }

    def _check_kind(self, kind: str):
        if kind not in DEVICE_KINDS:
            raise ValueError(f"Unknown device kind '{kind}'. Valid: {', '.join(DEVICE_KINDS)}")

    def list_devices(self, kind: str) -> List[Device]:
        self._check_kind(kind)
        cached = self.cache.get(kind)
        if cached is not None:
            return cached

        devices: List[Device] = []
        for discoverer in self._discoverers[kind]:
            try:
                devices.extend(discoverer.discover())
            except Exception as e:
                logging.error(f"Error running {discoverer.__class__.__name__}: {e}")

        # De-duplicate by id, keeping the first discoverer's entry.
        unique = {}
        for device in devices:
            unique.setdefault(device.id, device)
        devices = list(unique.values())
        self.cache.set(kind, devices)
        return devices

    def get_device_capabilities(self, kind: str, device_id: str) -> DeviceCapabilities:
        """Asks each discoverer of `kind` in turn; empty capabilities if none knows the device."""
        self._check_kind(kind)
        for discoverer in self._discoverers[kind]:
            try:
                caps = discoverer.capabilities(device_id)
            except Exception as e:
                logging.error(f"Error querying {discoverer.__class__.__name__} for '{device_id}': {e}")
                continue
            if caps is not None:
                return caps
        return DeviceCapabilities()


_default_service: Optional[DeviceService] = None


def _service() -> DeviceService:
    global _default_service
    if _default_service is None:
        _default_service = DeviceService(RecorderConfig.from_env())
    return _default_service


def list_devices(kind: str) -> List[Device]:
    return _service().list_devices(kind)


def get_device_capabilities(kind: str, device_id: str) -> DeviceCapabilities:
    return _service().get_device_capabilities(kind, device_id)
