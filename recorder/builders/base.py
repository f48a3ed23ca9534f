# recorder/builders/base.py
from typing import Any, List, Sequence, Tuple


def flags_from_table(spec: Any, table: Sequence[Tuple[str, str]]) -> List[str]:
    """Emits 'flag value' pairs for every attribute of `spec` in `table` that is set."""
    args: List[str] = []
    for attribute, flag in table:
        value = getattr(spec, attribute)
        if value is None:
            continue
        args.extend([flag, str(value)])
    return args
