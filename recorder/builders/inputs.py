# recorder/builders/inputs.py
from typing import List

from ..specs import InputVideoSpec, InputAudioSpec


class VideoInputCommandBuilder:
    def __init__(self, spec: InputVideoSpec):
        self.spec = spec

    def _source(self) -> str:
        # x11grab takes the capture offset as part of the display name
        spec = self.spec
        if spec.device == 'x11grab' and (spec.offset_x or spec.offset_y):
            return f"{spec.source}+{spec.offset_x},{spec.offset_y}"
        return spec.source

    def build_command(self) -> List[str]:
        spec = self.spec
        args = ['-f', spec.input_format or spec.device, '-framerate', str(spec.framerate)]
        if spec.video_size:
            args.extend(['-video_size', spec.video_size])
        args.extend(spec.extra_args)
        if spec.device == 'x11grab':
            if spec.show_cursor:
                args.extend(['-draw_mouse', '1'])
            if spec.follow_mouse:
                args.extend(['-follow_mouse', 'centered'])
        args.extend(['-i', self._source()])
        return args


class AudioInputCommandBuilder:
    def __init__(self, spec: InputAudioSpec):
        self.spec = spec

    def build_command(self) -> List[str]:
        spec = self.spec
        args = [
            '-f', spec.input_format or spec.device,
            '-sample_rate', str(spec.sample_rate),
            '-channels', str(spec.channels),
        ]
        args.extend(spec.extra_args)
        args.extend(['-i', spec.source])
        return args
