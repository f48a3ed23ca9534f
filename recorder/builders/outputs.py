# recorder/builders/outputs.py
from typing import List

from ..specs import OutputTarget


def guard_output_path(path: str) -> str:
    """Keeps an output path that starts with '-' from being parsed as an option."""
    if path.startswith('-'):
        return './' + path
    return path


class OutputCommandBuilder:
    def __init__(self, target: OutputTarget):
        self.target = target

    def build_command(self) -> List[str]:
        target = self.target
        args: List[str] = []
        if target.format:
            args.extend(['-f', target.format])
        if target.movflags:
            args.extend(['-movflags', target.movflags])
        for key, value in target.metadata.items():
            args.extend(['-metadata', f"{key}={value}"])
        args.extend(target.extra_args)
        args.append(guard_output_path(target.path))
        return args
