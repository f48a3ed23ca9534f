# recorder/devices/pulse.py
import logging
import re
import shutil
from typing import List, Optional

from .base import BaseDiscoverer
from ..interfaces import Device, DeviceCapabilities

# 1	alsa_input.pci-0000_00_1f.3.analog-stereo	module-alsa-card.c	s16le 2ch 48000Hz	SUSPENDED
SAMPLE_SPEC_RE = re.compile(r'(\S+)\s+(\d+)ch\s+(\d+)Hz')


class PulseDiscoverer(BaseDiscoverer):
    """Lists PulseAudio (or PipeWire-pulse) capture sources via pactl."""
    kind = 'audio'

    def _sources(self) -> List[List[str]]:
        output = self.run_subprocess(['pactl', 'list', 'short', 'sources'])
        return [line.split('\t') for line in output.splitlines() if line.strip()]

    def discover(self) -> List[Device]:
        if self.system != 'linux' or not shutil.which('pactl'):
            return []
        devices = [
            Device(name=columns[1], id=columns[1], device='pulse', kind='audio')
            for columns in self._sources() if len(columns) > 1
        ]
        logging.info(f"Discovered {len(devices)} PulseAudio source(s).")
        return devices

    def capabilities(self, device_id: str) -> Optional[DeviceCapabilities]:
        if not shutil.which('pactl'):
            return None
        for columns in self._sources():
            if len(columns) > 3 and columns[1] == device_id:
                match = SAMPLE_SPEC_RE.search(columns[3])
                if match:
                    fmt, channels, rate = match.groups()
                    return DeviceCapabilities(formats=[fmt], sample_rates=[int(rate)], channels=[int(channels)])
                return DeviceCapabilities()
        return None
