# recorder/builders/video.py
from typing import List

from .base import flags_from_table
from ..specs import VideoEncodingSpec

# Emitted in this order after '-c:v <codec>'
VIDEO_FLAGS = (
    ('preset', '-preset'),
    ('crf', '-crf'),
    ('bitrate', '-b:v'),
    ('maxrate', '-maxrate'),
    ('bufsize', '-bufsize'),
    ('pix_fmt', '-pix_fmt'),
    ('profile', '-profile:v'),
    ('level', '-level'),
    ('tune', '-tune'),
    ('keyint', '-g'),
    ('refs', '-refs'),
    ('threads', '-threads'),
)


class VideoCommandBuilder:
    def __init__(self, spec: VideoEncodingSpec):
        self.spec = spec

    def build_command(self) -> List[str]:
        args = ['-c:v', self.spec.codec]
        args.extend(flags_from_table(self.spec, VIDEO_FLAGS))
        args.extend(self.spec.extra_args)
        return args
