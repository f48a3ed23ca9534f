#!filepath: screencast.py
# --- Step 1: Standard Library Imports ---
import os
import sys
import asyncio
import argparse
import logging
from dataclasses import replace

# --- Step 2: Local Module Imports ---
# Kept inside the functions that use them, as in the rest of the CLI.

def build_recorder(args: argparse.Namespace, config):
    """Translates the parsed command line into a configured Recorder."""
    from recorder import Recorder, QualityProfile, quality_preset
    from file_operations import CrossPlatformFileOps

    recorder = Recorder(config)
    recorder.input_video(
        device=args.video_device,
        source=args.display,
        framerate=args.framerate,
        video_size=args.video_size,
        show_cursor=not args.no_cursor,
    )
    if not args.no_audio:
        recorder.input_audio(device=args.audio_device, source=args.audio_source)

    if args.preset:
        recorder.apply_preset(args.preset)
    else:
        recorder.apply_preset(quality_preset(QualityProfile(args.quality)))
    if args.no_audio:
        recorder.audio_output = None

    for expression in args.filter or []:
        recorder.filter_video(expression)

    output_path = CrossPlatformFileOps().resolve_output_path(args.output)
    movflags = '+faststart' if output_path.lower().endswith(('.mp4', '.mov')) else None
    recorder.output(output_path, movflags=movflags, overwrite=not args.no_overwrite)
    return recorder

def default_display() -> str:
    """$DISPLAY with the screen number spelled out, as x11grab expects (':1' -> ':1.0')."""
    display = os.environ.get('DISPLAY') or ':0'
    return display if '.' in display.split(':')[-1] else f"{display}.0"

def list_capture_devices():
    """Prints every capture device the platform probes can find."""
    from recorder import list_devices

    for kind in ('video', 'audio'):
        devices = list_devices(kind)
        print(f"{kind.capitalize()} devices:")
        if not devices:
            print("  (none found)")
        for device in devices:
            print(f"  [{device.device}] {device.id}  -  {device.name}")

def record(recorder, max_duration) -> bool:
    """Runs one recording session until it ends, is stopped, or Ctrl-C is pressed."""
    from recorder import LaunchError
    from progress_display import TqdmStatusDisplay

    display = TqdmStatusDisplay(max_duration)
    recorder.on_progress(display.update)
    recorder.on_error(lambda error: logging.error(f"Recorder error: {error}"))

    try:
        recorder.start()
    except LaunchError as e:
        display.finish()
        logging.critical(f"Could not start recording: {e}")
        return False

    try:
        asyncio.run(recorder.monitor(max_duration=max_duration))
    except KeyboardInterrupt:
        logging.info("Interrupted, stopping recording...")
        if recorder.running:
            recorder.stop()
    finally:
        display.finish()

    if not recorder.join(timeout=15):
        logging.warning("FFmpeg is still finalizing the output file in the background.")

    status = recorder.get_status()
    if status.error:
        logging.critical(f"❌ Recording failed: {status.error}")
        logging.debug(f"FFmpeg diagnostics:\n{recorder.get_stderr()}")
        return False
    logging.info(f"✅ Recorded {status.duration:.1f}s ({status.frames} frames).")
    return True

# --- Main Application Controller ---
def main():
    """
    Main entry point. Parses arguments, then either lists devices, prints the
    FFmpeg command, or records.
    """
    from recorder import RecorderConfig, QualityProfile, PRESETS
    from file_operations import CrossPlatformFileOps

    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"), format='%(asctime)s - [%(levelname)s] - %(message)s', datefmt='%H:%M:%S')

    parser = argparse.ArgumentParser(
        description="Screencast recorder - drives FFmpeg to capture the screen and audio.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="Examples:\n"
               "  screencast.py demo.mp4 --duration 60\n"
               "  screencast.py --preset streaming --no-audio rtmp://live.example/app/key\n"
               "  screencast.py --dry-run --framerate 60 --video-size 1920x1080 out.mkv"
    )
    parser.add_argument("output", nargs='?', default=None, help="Output file or URL. Bare names are saved to ~/Videos/Screencasts.")
    parser.add_argument("--preset", choices=sorted(PRESETS), help="Named encoding preset (overrides --quality).")
    parser.add_argument("--quality", choices=[q.value for q in QualityProfile], default='medium', help="libx264 quality profile.")
    parser.add_argument("--display", default=default_display(), help="Capture source (X11 display for x11grab).")
    parser.add_argument("--video-device", default='x11grab', help="FFmpeg input device for video.")
    parser.add_argument("--framerate", type=int, default=30)
    parser.add_argument("--video-size", default=None, help="Capture size, e.g. 1920x1080.")
    parser.add_argument("--no-cursor", action='store_true', help="Do not draw the mouse cursor.")
    parser.add_argument("--audio-device", default='pulse', help="FFmpeg input device for audio.")
    parser.add_argument("--audio-source", default='default')
    parser.add_argument("--no-audio", action='store_true')
    parser.add_argument("--filter", action='append', help="Video filter expression (repeatable).")
    parser.add_argument("--duration", type=float, default=None, help="Stop after this many seconds.")
    parser.add_argument("--no-overwrite", action='store_true', help="Fail instead of overwriting an existing file.")
    parser.add_argument("--ffmpeg", default=None, help="Path to the ffmpeg executable.")
    parser.add_argument("--dry-run", action='store_true', help="Print the FFmpeg command and exit.")
    parser.add_argument("--list-devices", action='store_true', help="List capture devices and exit.")

    args = parser.parse_args()

    if args.list_devices:
        list_capture_devices()
        return

    file_ops = CrossPlatformFileOps()
    try:
        config = RecorderConfig.from_env()
    except ValueError as e:
        logging.critical(f"Invalid configuration: {e}")
        sys.exit(1)
    config = replace(config, ffmpeg_path=args.ffmpeg or config.ffmpeg_path, log_dir=config.log_dir or file_ops.get_temp_dir())

    recorder = build_recorder(args, config)
    if args.dry_run:
        print(recorder.to_command())
        return

    ffmpeg_path = file_ops.get_executable_path(config.ffmpeg_path)
    if not ffmpeg_path:
        logging.critical(f"FATAL ERROR: '{config.ffmpeg_path}' not found.")
        logging.critical("Please ensure FFmpeg is installed and accessible in your system's PATH.")
        sys.exit(1)
    logging.info(f"Found ffmpeg at: {ffmpeg_path}")
    recorder.config.ffmpeg_path = ffmpeg_path

    if not record(recorder, args.duration):
        sys.exit(1)

if __name__ == "__main__":
    main()
