import re
from typing import Any, Optional

_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def parse_id(value: Any) -> Optional[int]:
    """
    Parse an identifier coming from a token claim, path or JSON body.

    Returns None for anything that is not an integer or a decimal string.
    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.match(value):
        return int(value)
    return None
