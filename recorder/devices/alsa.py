# recorder/devices/alsa.py
import logging
import re
import shutil
from typing import List

from .base import BaseDiscoverer
from ..interfaces import Device

# card 0: PCH [HDA Intel PCH], device 0: ALC3246 Analog [ALC3246 Analog]
CARD_RE = re.compile(r'^card (\d+): \S+ \[(.*?)\], device (\d+): .*?\[(.*?)\]')


class AlsaDiscoverer(BaseDiscoverer):
    """Lists ALSA capture devices via arecord."""
    kind = 'audio'

    def discover(self) -> List[Device]:
        if self.system != 'linux' or not shutil.which('arecord'):
            return []
        output = self.run_subprocess(['arecord', '-l'])
        devices: List[Device] = []
        for line in output.splitlines():
            match = CARD_RE.match(line.strip())
            if match:
                card, card_name, device, device_name = match.groups()
                devices.append(Device(name=f'{card_name}: {device_name}', id=f'hw:{card},{device}', device='alsa', kind='audio'))
        logging.info(f"Discovered {len(devices)} ALSA capture device(s).")
        return devices
