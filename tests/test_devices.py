import pytest

from recorder import DeviceDiscoveryError, RecorderConfig
from recorder.devices import DeviceService
from recorder.devices.alsa import AlsaDiscoverer
from recorder.devices.pulse import PulseDiscoverer
from recorder.devices.v4l2 import V4l2Discoverer, parse_list_formats
from recorder.devices.x11 import X11Discoverer
from recorder.interfaces import Device, DeviceCapabilities

PACTL_OUTPUT = (
    "1\talsa_output.pci-0000_00_1f.3.analog-stereo.monitor\tmodule-alsa-card.c\ts16le 2ch 48000Hz\tIDLE\n"
    "2\talsa_input.usb-Blue_Yeti-00.analog-stereo\tmodule-alsa-card.c\ts24le 2ch 44100Hz\tSUSPENDED\n"
)

ARECORD_OUTPUT = """**** List of CAPTURE Hardware Devices ****
card 0: PCH [HDA Intel PCH], device 0: ALC3246 Analog [ALC3246 Analog]
  Subdevices: 1/1
  Subdevice #0: subdevice #0
card 2: Microphone [Yeti Stereo Microphone], device 0: USB Audio [USB Audio]
  Subdevices: 1/1
"""

LIST_FORMATS_OUTPUT = """[video4linux2,v4l2 @ 0x55d0c8] Raw       :     yuyv422 :           YUYV 4:2:2 : 640x480 320x240 1280x720
[video4linux2,v4l2 @ 0x55d0c8] Compressed:       mjpeg :          Motion-JPEG : 1280x720 1920x1080
/dev/video0: Immediate exit requested
"""


def linux(discoverer):
    discoverer.system = "linux"
    return discoverer


def test_pulse_sources(monkeypatch):
    discoverer = linux(PulseDiscoverer())
    monkeypatch.setattr("recorder.devices.pulse.shutil.which", lambda name: "/usr/bin/pactl")
    monkeypatch.setattr(discoverer, "run_subprocess", lambda command, **kwargs: PACTL_OUTPUT)

    devices = discoverer.discover()
    assert [d.id for d in devices] == [
        "alsa_output.pci-0000_00_1f.3.analog-stereo.monitor",
        "alsa_input.usb-Blue_Yeti-00.analog-stereo",
    ]
    assert all(d.device == "pulse" and d.kind == "audio" for d in devices)

    caps = discoverer.capabilities("alsa_input.usb-Blue_Yeti-00.analog-stereo")
    assert caps == DeviceCapabilities(formats=["s24le"], sample_rates=[44100], channels=[2])
    assert discoverer.capabilities("unknown") is None


def test_alsa_capture_cards(monkeypatch):
    discoverer = linux(AlsaDiscoverer())
    monkeypatch.setattr("recorder.devices.alsa.shutil.which", lambda name: "/usr/bin/arecord")
    monkeypatch.setattr(discoverer, "run_subprocess", lambda command, **kwargs: ARECORD_OUTPUT)

    devices = discoverer.discover()
    assert [(d.id, d.name) for d in devices] == [
        ("hw:0,0", "HDA Intel PCH: ALC3246 Analog"),
        ("hw:2,0", "Yeti Stereo Microphone: USB Audio"),
    ]


def test_discoverers_are_silent_off_linux():
    discoverer = PulseDiscoverer()
    discoverer.system = "windows"
    assert discoverer.discover() == []


def test_x11_display_from_environment(monkeypatch):
    monkeypatch.setenv("DISPLAY", ":1")
    devices = linux(X11Discoverer()).discover()
    assert devices == [Device(name="X11 display :1.0", id=":1.0", device="x11grab", kind="video")]


def test_x11_without_display(monkeypatch):
    monkeypatch.delenv("DISPLAY", raising=False)
    assert linux(X11Discoverer()).discover() == []


def test_x11_capabilities_from_xdpyinfo(monkeypatch):
    discoverer = linux(X11Discoverer())
    monkeypatch.setattr("recorder.devices.x11.shutil.which", lambda name: "/usr/bin/xdpyinfo")
    monkeypatch.setattr(discoverer, "run_subprocess",
                        lambda command, **kwargs: "screen #0:\n  dimensions:    2560x1440 pixels (677x381 millimeters)\n")
    assert discoverer.capabilities(":0.0").resolutions == ["2560x1440"]
    assert discoverer.capabilities("/dev/video0") is None


def test_parse_list_formats():
    caps = parse_list_formats(LIST_FORMATS_OUTPUT)
    assert caps.formats == ["yuyv422", "mjpeg"]
    assert caps.resolutions == ["640x480", "320x240", "1280x720", "1920x1080"]


def test_v4l2_capabilities_reads_ffmpeg_stderr(monkeypatch):
    discoverer = V4l2Discoverer(ffmpeg_path="/usr/bin/ffmpeg")
    seen = {}

    def fake_run(command, check=True, stderr=False):
        seen.update(command=command, check=check, stderr=stderr)
        return LIST_FORMATS_OUTPUT

    monkeypatch.setattr(discoverer, "run_subprocess", fake_run)
    caps = discoverer.capabilities("/dev/video0")

    assert caps.formats == ["yuyv422", "mjpeg"]
    assert seen["command"][0] == "/usr/bin/ffmpeg"
    assert seen["check"] is False and seen["stderr"] is True


def test_run_subprocess_wraps_missing_tools():
    with pytest.raises(DeviceDiscoveryError):
        PulseDiscoverer().run_subprocess(["definitely-not-a-real-tool-xyz"])


class FakeDiscoverer:
    def __init__(self, devices=None, error=None, caps=None):
        self.devices = devices or []
        self.error = error
        self.caps = caps
        self.calls = 0

    def discover(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.devices

    def capabilities(self, device_id):
        if self.error:
            raise self.error
        return self.caps


def test_service_skips_failing_discoverers_and_deduplicates():
    service = DeviceService(RecorderConfig())
    mic = Device(name="Mic", id="default", device="pulse", kind="audio")
    service._discoverers["audio"] = [
        FakeDiscoverer(error=DeviceDiscoveryError("pactl exploded")),
        FakeDiscoverer(devices=[mic]),
        FakeDiscoverer(devices=[Device(name="Mic again", id="default", device="alsa", kind="audio")]),
    ]
    assert service.list_devices("audio") == [mic]


def test_service_caches_per_kind():
    service = DeviceService(RecorderConfig(device_cache_seconds=60))
    fake = FakeDiscoverer(devices=[Device(name="Screen", id=":0.0", device="x11grab")])
    service._discoverers["video"] = [fake]

    service.list_devices("video")
    service.list_devices("video")
    assert fake.calls == 1

    service.cache.clear()
    service.list_devices("video")
    assert fake.calls == 2


def test_service_without_cache_expiry_always_probes():
    service = DeviceService(RecorderConfig(device_cache_seconds=0))
    fake = FakeDiscoverer()
    service._discoverers["video"] = [fake]
    service.list_devices("video")
    service.list_devices("video")
    assert fake.calls == 2


def test_capabilities_fall_back_to_empty():
    service = DeviceService(RecorderConfig())
    caps = DeviceCapabilities(resolutions=["1920x1080"])
    service._discoverers["video"] = [FakeDiscoverer(error=RuntimeError("boom")), FakeDiscoverer(caps=caps)]
    assert service.get_device_capabilities("video", ":0.0") == caps

    service._discoverers["video"] = [FakeDiscoverer()]
    assert service.get_device_capabilities("video", ":0.0") == DeviceCapabilities()


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        DeviceService().list_devices("midi")
