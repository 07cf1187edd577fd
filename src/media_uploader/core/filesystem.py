"""Local filesystem access for picked image assets."""

import base64
import os
from pathlib import Path
from urllib.parse import unquote, urlparse

from .exceptions import with_error_handling


def resolve_uri(uri: str) -> Path:
    """
    Turn an asset handle into a filesystem path.

    Accepts ``file://`` URIs (percent-encoded, as image pickers produce them)
    and plain paths.
    """
    if uri.startswith("file:"):
        parsed = urlparse(uri)
        return Path(unquote(parsed.path))
    return Path(uri)


class LocalFileSystem:
    """Filesystem capability backed by the local disk."""

    def exists(self, uri: str) -> bool:
        """Whether the handle points at a readable regular file."""
        if not uri:
            return False
        try:
            path = resolve_uri(uri)
            return path.is_file() and os.access(path, os.R_OK)
        except (OSError, ValueError):
            return False

    @with_error_handling
    def read_as_encoded_text(self, uri: str) -> str:
        """Read the whole resource and return it as base64 text."""
        data = resolve_uri(uri).read_bytes()
        return base64.b64encode(data).decode("ascii")
