# recorder/specs.py
"""
Plain records describing what to capture, how to encode it and where to write
it. They carry defaults only; turning them into FFmpeg flags is the job of the
builders in recorder/builders.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

Number = Union[int, float]


@dataclass
class InputVideoSpec:
    """A video capture source (screen grab, webcam, ...)."""
    device: str = 'x11grab'
    source: str = ':0'
    framerate: Number = 30
    video_size: Optional[str] = '800x600'
    offset_x: int = 0
    offset_y: int = 0
    show_cursor: bool = True
    follow_mouse: bool = False
    input_format: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)


@dataclass
class InputAudioSpec:
    """An audio capture source (PulseAudio, ALSA, ...)."""
    device: str = 'alsa'
    source: str = 'default'
    sample_rate: int = 48000
    channels: int = 2
    input_format: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)


@dataclass
class VideoEncodingSpec:
    """Video encoder settings. CRF and bitrate/maxrate/bufsize may be combined."""
    codec: str = 'libx264'
    preset: Optional[str] = None
    crf: Optional[Number] = None
    bitrate: Optional[str] = None
    maxrate: Optional[str] = None
    bufsize: Optional[str] = None
    pix_fmt: Optional[str] = 'yuv420p'
    profile: Optional[str] = None
    level: Optional[str] = None
    tune: Optional[str] = None
    keyint: Optional[int] = None
    refs: Optional[int] = None
    threads: Optional[int] = 0
    extra_args: List[str] = field(default_factory=list)


@dataclass
class AudioEncodingSpec:
    """Audio encoder settings."""
    codec: str = 'aac'
    bitrate: Optional[str] = '192k'
    sample_rate: Optional[int] = 48000
    channels: Optional[int] = 2
    profile: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)


@dataclass
class OutputTarget:
    """A destination file or URL plus its container options."""
    path: str
    format: Optional[str] = None
    movflags: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    overwrite: bool = True
    extra_args: List[str] = field(default_factory=list)


@dataclass
class StreamMap:
    """Routes a filter graph label or input stream (e.g. '[outv]', '1:a') to the output."""
    stream: str
    label: Optional[str] = None


@dataclass
class FilterChain:
    """Simple per-track filters, or a complex graph which takes precedence over them."""
    video: List[str] = field(default_factory=list)
    audio: List[str] = field(default_factory=list)
    complex_graph: str = ''
    stream_maps: List[StreamMap] = field(default_factory=list)

    @property
    def uses_complex_graph(self) -> bool:
        return bool(self.complex_graph)
