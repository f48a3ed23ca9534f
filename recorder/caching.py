# recorder/caching.py
import logging
import time
from dataclasses import dataclass
from typing import List, Dict, Optional

from .interfaces import Device


@dataclass
class CacheEntry:
    """Holds cached device data and its timestamp."""
    devices: List[Device]
    timestamp: float


class DeviceCache:
    """Handles storing, retrieving, and expiring cached device lists per kind."""
    def __init__(self, expiry_seconds: int):
        self.expiry_seconds = expiry_seconds
        self._cache: Dict[str, CacheEntry] = {}

    def get(self, kind: str) -> Optional[List[Device]]:
        """Retrieves a device list from the cache if it's present and not expired."""
        if kind in self._cache:
            entry = self._cache[kind]
            if (time.time() - entry.timestamp) < self.expiry_seconds:
                logging.debug(f"Returning cached {kind} device list.")
                return list(entry.devices)
            else:
                logging.debug(f"Cached {kind} device list expired.")
                del self._cache[kind]
        return None

    def set(self, kind: str, devices: List[Device]):
        self._cache[kind] = CacheEntry(devices=list(devices), timestamp=time.time())

    def clear(self):
        self._cache.clear()
