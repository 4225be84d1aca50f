"""
s3_deploy.content_type — Path to Content-Type lookup.

Uses the interpreter's built-in mimetypes table (not the host's
/etc/mime.types, so results are the same on every machine) plus a few
web-asset extensions that table gets wrong or lacks.
"""

from __future__ import annotations

import mimetypes
from pathlib import PurePosixPath

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_OVERRIDES: dict[str, str] = {
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".map": "application/json",
    ".webmanifest": "application/manifest+json",
    ".wasm": "application/wasm",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}

_mime = mimetypes.MimeTypes()


def content_type_for(path: str) -> str:
    """Return the Content-Type for path; never raises.

    Falls back to application/octet-stream for unknown extensions.
    """
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    if suffix in _OVERRIDES:
        return _OVERRIDES[suffix]
    guessed, _encoding = _mime.guess_type(f"file{suffix}") if suffix else (None, None)
    return guessed or DEFAULT_CONTENT_TYPE
