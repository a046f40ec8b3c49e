import re
from typing import Any, Optional

from friendship_api.config import settings


def profile_picture_url(stored_path: Any, base_url: Optional[str] = None) -> Optional[str]:
    """
    Turn a stored profile picture path into a public URL.

    Only the final path segment is kept, so absolute paths, relative paths and
    ``..`` components all collapse to a file name under the uploads origin.
    A path whose final segment is ``.`` or ``..`` yields None.

    Args:
        stored_path: Value of ``users.profile_picture``
        base_url: Uploads origin, defaults to ``settings.uploads_base_url``

    Returns:
        The absolute URL, or None when nothing usable is stored

    Examples:
        >>> profile_picture_url("/var/data/pics/avatar7.png", "http://localhost:5000/uploads")
        'http://localhost:5000/uploads/avatar7.png'
        >>> profile_picture_url("", "http://localhost:5000/uploads") is None
        True
    """
    if not stored_path or not isinstance(stored_path, str):
        return None

    segments = [s for s in re.split(r"[\\/]+", stored_path) if s]
    # A path ending in "." or ".." names no file
    if not segments or segments[-1] in (".", ".."):
        return None

    base = (base_url if base_url is not None else settings.uploads_base_url).rstrip("/")
    return f"{base}/{segments[-1]}"

