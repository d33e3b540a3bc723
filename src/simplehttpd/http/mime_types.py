"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

MIME types tell the client how to interpret a response body. When the
server sends a file, the Content-Type comes from the file's extension:

    Test.mp3   → audio/mpeg
    index.html → text/html

Unknown extensions fall back to application/octet-stream ("binary, no
idea what it is"), which makes browsers offer a download instead of
guessing.

=============================================================================
"""

from pathlib import Path
from typing import Optional


MIME_TYPES = {
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".txt": "text/plain",

    # -------------------------------------------------------------------------
    # AUDIO TYPES
    # -------------------------------------------------------------------------
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".opus": "audio/opus",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".mid": "audio/midi",
    ".midi": "audio/midi",
    ".weba": "audio/webm",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".ico": "image/x-icon",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def get_mime_type(path: str | Path, default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

    Examples:
        >>> get_mime_type("Test.mp3")
        'audio/mpeg'

        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()  # .MP3 → .mp3
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)
