# recorder/presets.py
import copy
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import QualityProfile, QualityMapper
from .specs import VideoEncodingSpec, AudioEncodingSpec


@dataclass(frozen=True)
class Preset:
    """A named pair of encoding settings. Each apply builds fresh spec objects."""
    name: str
    video: Optional[Dict[str, Any]] = None
    audio: Optional[Dict[str, Any]] = None

    def video_spec(self) -> Optional[VideoEncodingSpec]:
        return VideoEncodingSpec(**copy.deepcopy(self.video)) if self.video is not None else None

    def audio_spec(self) -> Optional[AudioEncodingSpec]:
        return AudioEncodingSpec(**copy.deepcopy(self.audio)) if self.audio is not None else None


PRESETS: Dict[str, Preset] = {
    'youtube_1080p': Preset(
        name='youtube_1080p',
        video={'codec': 'libx264', 'preset': 'medium', 'crf': 23, 'pix_fmt': 'yuv420p', 'profile': 'high', 'level': '4.1'},
        audio={'codec': 'aac', 'bitrate': '192k', 'sample_rate': 48000},
    ),
    'high_quality': Preset(
        name='high_quality',
        video={'codec': 'libx264', 'preset': 'slower', 'crf': 18, 'pix_fmt': 'yuv420p'},
        audio={'codec': 'aac', 'bitrate': '320k', 'sample_rate': 48000},
    ),
    'streaming': Preset(
        name='streaming',
        video={'codec': 'libx264', 'preset': 'ultrafast', 'tune': 'zerolatency', 'crf': 23, 'keyint': 60},
        audio={'codec': 'aac', 'bitrate': '128k', 'sample_rate': 44100},
    ),
    # Hardware encoders are only forwarded to FFmpeg; the device must exist at runtime.
    'nvenc': Preset(
        name='nvenc',
        video={'codec': 'h264_nvenc', 'preset': 'p5', 'bitrate': '8M', 'maxrate': '10M', 'bufsize': '16M', 'threads': None},
    ),
    # Needs a 'format=nv12,hwupload' video filter and a -vaapi_device global flag.
    'vaapi': Preset(
        name='vaapi',
        video={'codec': 'h264_vaapi', 'pix_fmt': None, 'profile': 'high', 'threads': None,
               'extra_args': ['-qp', '23']},
    ),
    'qsv': Preset(
        name='qsv',
        video={'codec': 'h264_qsv', 'preset': 'medium', 'pix_fmt': 'nv12', 'threads': None,
               'extra_args': ['-global_quality', '23']},
    ),
}


def get_preset(name: str) -> Preset:
    """Looks a preset up by name, raising KeyError with the known names if missing."""
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(sorted(PRESETS))}") from None


def quality_preset(profile: QualityProfile) -> Preset:
    """Builds a libx264/AAC preset whose speed and CRF follow the quality profile."""
    return Preset(
        name=f"x264_{profile.value}",
        video={'codec': 'libx264', 'preset': QualityMapper.get_x264_preset(profile), 'crf': QualityMapper.get_crf(profile)},
        audio={'codec': 'aac', 'bitrate': '192k'},
    )
