# recorder/config.py
import os
import signal
from enum import Enum
from dataclasses import dataclass
from typing import Optional


class QualityProfile(Enum):
    """Defines standard names for quality levels."""
    ULTRA, HIGH, MEDIUM, FAST, ULTRAFAST = "ultra", "high", "medium", "fast", "ultrafast"


@dataclass
class RecorderConfig:
    """Centralizes runtime settings of the supervisor to avoid magic numbers."""
    ffmpeg_path: str = 'ffmpeg'
    log_dir: Optional[str] = None  # None means the system temp directory
    grace_period: float = 0.2
    stop_signal: int = signal.SIGINT
    poll_interval: float = 0.5
    stderr_tail_lines: int = 5
    device_cache_seconds: int = 300

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not self.ffmpeg_path:
            raise ValueError("ffmpeg_path must not be empty.")
        if self.grace_period < 0:
            raise ValueError("grace_period cannot be negative.")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive.")
        if self.stderr_tail_lines <= 0:
            raise ValueError("stderr_tail_lines must be positive.")
        if self.device_cache_seconds < 0:
            raise ValueError("device_cache_seconds cannot be negative.")

    @classmethod
    def from_env(cls) -> 'RecorderConfig':
        """Builds a config, letting SCREENCAST_* environment variables override the defaults."""
        kwargs = {}
        if os.getenv('SCREENCAST_FFMPEG'):
            kwargs['ffmpeg_path'] = os.environ['SCREENCAST_FFMPEG']
        if os.getenv('SCREENCAST_LOG_DIR'):
            kwargs['log_dir'] = os.environ['SCREENCAST_LOG_DIR']
        if os.getenv('SCREENCAST_GRACE_PERIOD'):
            try:
                kwargs['grace_period'] = float(os.environ['SCREENCAST_GRACE_PERIOD'])
            except ValueError:
                raise ValueError("SCREENCAST_GRACE_PERIOD must be a number.") from None
        return cls(**kwargs)


class QualityMapper:
    """Centralizes quality profile to libx264 parameter mapping."""
    _CRF_MAP = {QualityProfile.ULTRA: 18, QualityProfile.HIGH: 21, QualityProfile.MEDIUM: 23, QualityProfile.FAST: 25, QualityProfile.ULTRAFAST: 27}
    _PRESET_MAP_X264 = {QualityProfile.ULTRA: 'slower', QualityProfile.HIGH: 'slow', QualityProfile.MEDIUM: 'medium', QualityProfile.FAST: 'fast', QualityProfile.ULTRAFAST: 'ultrafast'}
    _PRESET_MAP_NVENC = {QualityProfile.ULTRA: 'p7', QualityProfile.HIGH: 'p6', QualityProfile.MEDIUM: 'p5', QualityProfile.FAST: 'p4', QualityProfile.ULTRAFAST: 'p1'}

    @staticmethod
    def get_crf(profile: QualityProfile) -> int:
        return QualityMapper._CRF_MAP[profile]

    @staticmethod
    def get_x264_preset(profile: QualityProfile) -> str:
        return QualityMapper._PRESET_MAP_X264[profile]

    @staticmethod
    def get_nvenc_preset(profile: QualityProfile) -> str:
        return QualityMapper._PRESET_MAP_NVENC[profile]
