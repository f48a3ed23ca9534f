# recorder/__init__.py

# Expose the main Recorder class for easy importing
from .recorder import Recorder
from .builder import RecordingConfig
from .command import build_args, to_command
from .supervisor import ProcessSupervisor

# Expose key data classes and enums as well.
from .config import RecorderConfig, QualityProfile
from .specs import (
    InputVideoSpec, InputAudioSpec, VideoEncodingSpec, AudioEncodingSpec,
    OutputTarget, StreamMap, FilterChain,
)
from .events import StatusSnapshot, SupervisorState
from .presets import PRESETS, Preset, get_preset, quality_preset
from .devices import list_devices, get_device_capabilities
from .errors import (
    RecorderError, AlreadyRunningError, NotRunningError, LaunchError, UnsupportedError,
    CallbackError, StreamReadError, ProcessExitError, DeviceDiscoveryError,
)
