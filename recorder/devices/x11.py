# recorder/devices/x11.py
import logging
import os
import re
import shutil
from typing import List, Optional

from .base import BaseDiscoverer
from ..interfaces import Device, DeviceCapabilities
from ..errors import DeviceDiscoveryError

DIMENSIONS_RE = re.compile(r'dimensions:\s+(\d+x\d+)\s+pixels')


class X11Discoverer(BaseDiscoverer):
    """Reports the X11 display named by $DISPLAY as an x11grab source."""

    def discover(self) -> List[Device]:
        display = os.environ.get('DISPLAY')
        if self.system != 'linux' or not display:
            return []
        # x11grab wants the screen number spelled out
        source = display if '.' in display.split(':')[-1] else f"{display}.0"
        return [Device(name=f'X11 display {source}', id=source, device='x11grab', kind='video')]

    def capabilities(self, device_id: str) -> Optional[DeviceCapabilities]:
        if ':' not in device_id:
            return None
        caps = DeviceCapabilities(formats=['bgr0'])
        if not shutil.which('xdpyinfo'):
            return caps
        try:
            output = self.run_subprocess(['xdpyinfo', '-display', device_id])
        except DeviceDiscoveryError as e:
            logging.warning(f"Could not query X11 display {device_id}: {e}")
            return caps
        caps.resolutions = DIMENSIONS_RE.findall(output)
        return caps
