# recorder/builders/__init__.py
from .base import flags_from_table
from .inputs import VideoInputCommandBuilder, AudioInputCommandBuilder
from .video import VideoCommandBuilder
from .audio import AudioCommandBuilder
from .outputs import OutputCommandBuilder, guard_output_path
