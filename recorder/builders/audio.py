# recorder/builders/audio.py
from typing import List

from .base import flags_from_table
from ..specs import AudioEncodingSpec

AUDIO_FLAGS = (
    ('bitrate', '-b:a'),
    ('sample_rate', '-ar'),
    ('channels', '-ac'),
    ('profile', '-profile:a'),
)


class AudioCommandBuilder:
    def __init__(self, spec: AudioEncodingSpec):
        self.spec = spec

    def build_command(self) -> List[str]:
        args = ['-c:a', self.spec.codec]
        args.extend(flags_from_table(self.spec, AUDIO_FLAGS))
        args.extend(self.spec.extra_args)
        return args
