# recorder/interfaces.py
from typing import Protocol, List, Optional
from dataclasses import dataclass, field


class CommandBuilder(Protocol):
    """Interface for any class that turns one configuration record into FFmpeg flags."""
    def build_command(self) -> List[str]:
        ...


@dataclass
class Device:
    """A capture device as reported by a platform probe."""
    name: str
    id: str
    device: str  # the FFmpeg input device (-f value) that reads it
    kind: str = 'video'


@dataclass
class DeviceCapabilities:
    """What a capture device can deliver. Lists stay empty when a probe cannot tell."""
    formats: List[str] = field(default_factory=list)
    resolutions: List[str] = field(default_factory=list)
    framerates: List[float] = field(default_factory=list)
    sample_rates: List[int] = field(default_factory=list)
    channels: List[int] = field(default_factory=list)


class Discoverer(Protocol):
    """Interface for any class that discovers one family of capture devices."""
    def discover(self) -> List[Device]:
        ...

    def capabilities(self, device_id: str) -> Optional[DeviceCapabilities]:
        ...
