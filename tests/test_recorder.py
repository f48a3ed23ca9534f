import asyncio
import shlex

import pytest

from recorder import (
    Recorder, RecordingConfig, InputVideoSpec, VideoEncodingSpec, StatusSnapshot,
    SupervisorState, AlreadyRunningError, NotRunningError, UnsupportedError,
)
from conftest import python_command, write_stderr, progress_line, wait_until


@pytest.fixture
def recorder(config):
    recorder = Recorder(config)
    yield recorder
    if recorder.running:
        recorder.stop()
    recorder.join(timeout=5)


def fake_ffmpeg(recorder, *statements):
    """Makes the recorder launch a Python stand-in instead of ffmpeg."""
    command = python_command(*statements)
    recorder.build_args = lambda: command
    return command


def test_builder_methods_chain_on_the_same_instance(recorder):
    chained = (recorder
               .input_video(source=":1.0")
               .add_input_video(InputVideoSpec(device="v4l2", source="/dev/video0"))
               .input_audio(device="pulse")
               .add_input_audio()
               .output_video(codec="libx265")
               .output_audio()
               .filter_video("scale=1280:-2")
               .filter_audio("volume=2")
               .filter_complex("[0:v]null[v]")
               .map("[v]")
               .map_stream("1:a")
               .output("out.mkv")
               .global_flags("-thread_queue_size", "512"))
    assert chained is recorder
    assert [spec.source for spec in recorder.video_inputs] == [":1.0", "/dev/video0"]
    assert len(recorder.audio_inputs) == 2
    assert [m.stream for m in recorder.filters.stream_maps] == ["[v]", "1:a"]


def test_encoding_specs_overwrite_and_lists_accumulate():
    config = RecordingConfig().output_video(codec="libx264", crf=18).output_video(codec="libvpx-vp9")
    config.filter_video("a").filter_video("b").output("1.mp4").output("2.mp4")

    assert config.video_output == VideoEncodingSpec(codec="libvpx-vp9")
    assert config.filters.video == ["a", "b"]
    assert [target.path for target in config.outputs] == ["1.mp4", "2.mp4"]


def test_callback_registration_replaces_previous(recorder):
    calls = []
    recorder.on_start(lambda: calls.append("first"))
    assert recorder.on_start(lambda: calls.append("second")) is recorder
    fake_ffmpeg(recorder, "time.sleep(30)")

    recorder.start()
    assert calls == ["second"]


def test_lifecycle_through_the_facade(recorder):
    progress = []
    recorder.on_progress(progress.append)
    command = fake_ffmpeg(recorder, write_stderr(progress_line(42, 64, 1.4)), "time.sleep(30)")

    recorder.start()
    assert recorder.running
    assert recorder.get_command().endswith("time.sleep(30)'")
    assert recorder.get_command() == shlex.join(command)

    with pytest.raises(AlreadyRunningError):
        recorder.start()
    with pytest.raises(UnsupportedError):
        recorder.pause()

    assert wait_until(lambda: recorder.update().frames == 42)
    assert isinstance(progress[-1], StatusSnapshot)
    assert progress[-1].frames == 42
    assert "frame=" in recorder.get_stderr()

    recorder.stop()
    assert recorder.get_status().state == SupervisorState.IDLE
    with pytest.raises(NotRunningError):
        recorder.stop()


def test_monitor_stops_after_max_duration(recorder):
    fake_ffmpeg(recorder, "time.sleep(30)")
    stops = []
    recorder.on_stop(lambda: stops.append(True))
    recorder.start()

    status = asyncio.run(recorder.monitor(poll_interval=0.05, max_duration=0.3))

    assert not status.running
    assert stops == [True]
    assert recorder.join(timeout=10)


def test_monitor_returns_when_process_finishes(recorder):
    fake_ffmpeg(recorder, write_stderr(progress_line(9, 1, 0.3)), "time.sleep(0.2)")
    recorder.start()

    status = asyncio.run(recorder.monitor(poll_interval=0.05))

    assert status.state == SupervisorState.IDLE
    assert status.frames == 9


def test_apply_preset_by_name_replaces_encoding(recorder):
    recorder.output_video(codec="libvpx").apply_preset("youtube_1080p")
    assert recorder.video_output.codec == "libx264"
    assert recorder.video_output.level == "4.1"
    assert recorder.audio_output.bitrate == "192k"


def test_keyword_options_refine_a_given_spec():
    base = InputVideoSpec(device="v4l2", source="/dev/video0")
    config = (RecordingConfig()
              .input_video(base, framerate=60)
              .output_video(VideoEncodingSpec(codec="libx264"), crf=20))

    assert config.video_inputs[0].framerate == 60
    assert config.video_inputs[0].source == "/dev/video0"
    assert base.framerate == 30
    assert config.video_output == VideoEncodingSpec(codec="libx264", crf=20)
