# recorder/builder.py
from dataclasses import replace
from typing import Any, List, Optional, Union

from .specs import (
    InputVideoSpec, InputAudioSpec, VideoEncodingSpec, AudioEncodingSpec,
    OutputTarget, StreamMap, FilterChain,
)
from .presets import Preset, get_preset


def _merge(spec: Optional[Any], spec_type: type, options: dict) -> Any:
    """Builds a spec from keyword options, or copies `spec` with the options applied on top."""
    if spec is None:
        return spec_type(**options)
    return replace(spec, **options) if options else spec


class RecordingConfig:
    """
    Accumulates everything FFmpeg needs to know about one recording.

    Every mutator returns the instance so calls can be chained. Inputs, filters,
    outputs and stream maps accumulate; the video and audio encoding specs are
    replaced on each call.
    """
    def __init__(self):
        self.video_inputs: List[InputVideoSpec] = []
        self.audio_inputs: List[InputAudioSpec] = []
        self.video_output: Optional[VideoEncodingSpec] = None
        self.audio_output: Optional[AudioEncodingSpec] = None
        self.filters = FilterChain()
        self.outputs: List[OutputTarget] = []
        self.global_args: List[str] = []

    def global_flags(self, *args: str) -> 'RecordingConfig':
        """Adds flags placed before the first input, e.g. '-vaapi_device', '/dev/dri/renderD128'."""
        self.global_args.extend(args)
        return self

    # --- Inputs ---
    def input_video(self, spec: Optional[InputVideoSpec] = None, **options) -> 'RecordingConfig':
        self.video_inputs.append(_merge(spec, InputVideoSpec, options))
        return self

    def add_input_video(self, spec: Optional[InputVideoSpec] = None, **options) -> 'RecordingConfig':
        return self.input_video(spec, **options)

    def input_audio(self, spec: Optional[InputAudioSpec] = None, **options) -> 'RecordingConfig':
        self.audio_inputs.append(_merge(spec, InputAudioSpec, options))
        return self

    def add_input_audio(self, spec: Optional[InputAudioSpec] = None, **options) -> 'RecordingConfig':
        return self.input_audio(spec, **options)

    # --- Encoding ---
    def output_video(self, spec: Optional[VideoEncodingSpec] = None, **options) -> 'RecordingConfig':
        self.video_output = _merge(spec, VideoEncodingSpec, options)
        return self

    def output_audio(self, spec: Optional[AudioEncodingSpec] = None, **options) -> 'RecordingConfig':
        self.audio_output = _merge(spec, AudioEncodingSpec, options)
        return self

    def apply_preset(self, preset: Union[str, Preset]) -> 'RecordingConfig':
        """Replaces the encoding specs with the ones a preset (or preset name) carries."""
        if isinstance(preset, str):
            preset = get_preset(preset)
        if preset.video is not None:
            self.output_video(preset.video_spec())
        if preset.audio is not None:
            self.output_audio(preset.audio_spec())
        return self

    # --- Filters ---
    def filter_video(self, expression: str) -> 'RecordingConfig':
        self.filters.video.append(expression)
        return self

    def filter_audio(self, expression: str) -> 'RecordingConfig':
        self.filters.audio.append(expression)
        return self

    def filter_complex(self, graph: str) -> 'RecordingConfig':
        self.filters.complex_graph = graph
        return self

    def map(self, stream: str, label: Optional[str] = None) -> 'RecordingConfig':
        self.filters.stream_maps.append(StreamMap(stream=stream, label=label))
        return self

    def map_stream(self, stream: str, label: Optional[str] = None) -> 'RecordingConfig':
        return self.map(stream, label)

    # --- Outputs ---
    def output(self, path: Union[str, OutputTarget], **options) -> 'RecordingConfig':
        if isinstance(path, OutputTarget):
            self.outputs.append(_merge(path, OutputTarget, options))
        else:
            self.outputs.append(OutputTarget(path=path, **options))
        return self
