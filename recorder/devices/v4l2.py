# recorder/devices/v4l2.py
import logging
import os
import re
from typing import List, Optional

from .base import BaseDiscoverer
from ..interfaces import Device, DeviceCapabilities
from ..errors import DeviceDiscoveryError

# [video4linux2,v4l2 @ 0x55d0c8] Raw       :     yuyv422 :           YUYV 4:2:2 : 640x480 320x240
FORMAT_LINE_RE = re.compile(r'\]\s*(?:Raw|Compressed)\s*:\s*(\S+)\s*:[^:]*:\s*(.*)$')
RESOLUTION_RE = re.compile(r'\d+x\d+')


def parse_list_formats(output: str) -> DeviceCapabilities:
    """Parses the stderr of `ffmpeg -f v4l2 -list_formats all -i <dev>`."""
    caps = DeviceCapabilities()
    for line in output.splitlines():
        match = FORMAT_LINE_RE.search(line)
        if not match:
            continue
        fmt, sizes = match.groups()
        if fmt not in caps.formats:
            caps.formats.append(fmt)
        for size in RESOLUTION_RE.findall(sizes):
            if size not in caps.resolutions:
                caps.resolutions.append(size)
    return caps


class V4l2Discoverer(BaseDiscoverer):
    """Detects Video4Linux2 capture nodes in /dev."""

    def __init__(self, ffmpeg_path: str = 'ffmpeg'):
        super().__init__()
        self.ffmpeg_path = ffmpeg_path

    def _device_name(self, node: str) -> str:
        name_file = os.path.join('/sys/class/video4linux', node, 'name')
        try:
            with open(name_file, 'r', encoding='utf-8') as f:
                return f.read().strip() or node
        except OSError:
            return node

    def discover(self) -> List[Device]:
        if self.system != 'linux' or not os.path.isdir('/dev'):
            return []
        nodes = sorted(d for d in os.listdir('/dev') if re.fullmatch(r'video\d+', d))
        devices = [
            Device(name=self._device_name(node), id=os.path.join('/dev', node), device='v4l2', kind='video')
            for node in nodes
        ]
        logging.info(f"Discovered {len(devices)} V4L2 device(s).")
        return devices

    def capabilities(self, device_id: str) -> Optional[DeviceCapabilities]:
        if not device_id.startswith('/dev/video'):
            return None
        try:
            # FFmpeg exits non-zero after listing formats, so don't check the code
            output = self.run_subprocess(
                [self.ffmpeg_path, '-hide_banner', '-f', 'v4l2', '-list_formats', 'all', '-i', device_id],
                check=False, stderr=True,
            )
        except DeviceDiscoveryError as e:
            logging.warning(f"Could not list formats for {device_id}: {e}")
            return DeviceCapabilities()
        return parse_list_formats(output)
