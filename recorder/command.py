# recorder/command.py
"""
Turns a RecordingConfig into the FFmpeg argument vector.

The order is fixed because FFmpeg's option parser is position sensitive:
global flags, video inputs, audio inputs, filters, video encoding, audio
encoding, then each output. Both functions are pure and never raise.
"""
import shlex
from typing import List

from .builder import RecordingConfig
from .builders import (
    VideoInputCommandBuilder, AudioInputCommandBuilder,
    VideoCommandBuilder, AudioCommandBuilder, OutputCommandBuilder,
)
from .interfaces import CommandBuilder

GLOBAL_FLAGS = ['-hide_banner', '-nostdin']


def _overwrite_flags(config: RecordingConfig) -> List[str]:
    if not config.outputs:
        return []
    # -y/-n are global in FFmpeg, so a single overwriting output decides for all
    if any(target.overwrite for target in config.outputs):
        return ['-y']
    return ['-n']


def _filter_flags(config: RecordingConfig) -> List[str]:
    filters = config.filters
    if filters.uses_complex_graph:
        args = ['-filter_complex', filters.complex_graph]
        for stream_map in filters.stream_maps:
            args.extend(['-map', stream_map.stream])
        return args

    args = []
    if filters.video:
        args.extend(['-vf', ','.join(filters.video)])
    if filters.audio:
        args.extend(['-af', ','.join(filters.audio)])
    return args


def _input_builders(config: RecordingConfig) -> List[CommandBuilder]:
    builders: List[CommandBuilder] = []
    builders.extend(VideoInputCommandBuilder(spec) for spec in config.video_inputs)
    builders.extend(AudioInputCommandBuilder(spec) for spec in config.audio_inputs)
    return builders


def build_args(config: RecordingConfig, ffmpeg_path: str = 'ffmpeg') -> List[str]:
    """Assembles the full argument vector, executable first."""
    args = [ffmpeg_path]
    args.extend(GLOBAL_FLAGS)
    args.extend(_overwrite_flags(config))
    args.extend(config.global_args)

    for builder in _input_builders(config):
        args.extend(builder.build_command())

    args.extend(_filter_flags(config))

    if config.video_output is not None:
        args.extend(VideoCommandBuilder(config.video_output).build_command())
    if config.audio_output is not None:
        args.extend(AudioCommandBuilder(config.audio_output).build_command())

    for target in config.outputs:
        args.extend(OutputCommandBuilder(target).build_command())
    return [str(arg) for arg in args]


def to_command(config: RecordingConfig, ffmpeg_path: str = 'ffmpeg') -> str:
    """Renders the argument vector as one shell-safe command string."""
    return shlex.join(build_args(config, ffmpeg_path))
