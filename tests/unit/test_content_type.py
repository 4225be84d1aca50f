"""Unit tests for s3_deploy.content_type."""

from __future__ import annotations

import pytest
from s3_deploy.content_type import DEFAULT_CONTENT_TYPE, content_type_for


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("index.html", "text/html"),
        ("css/app.css", "text/css"),
        ("js/app.js", "application/javascript"),
        ("img/logo.png", "image/png"),
        ("img/logo.svg", "image/svg+xml"),
        ("manifest.json", "application/json"),
        ("site.webmanifest", "application/manifest+json"),
        ("fonts/a.woff2", "font/woff2"),
        ("INDEX.HTML", "text/html"),
    ],
)
def test_known_extensions(path: str, expected: str) -> None:
    assert content_type_for(path) == expected


@pytest.mark.parametrize("path", ["LICENSE", "data.unknownext", "dir/.hidden", ""])
def test_unknown_falls_back_to_octet_stream(path: str) -> None:
    assert content_type_for(path) == DEFAULT_CONTENT_TYPE == "application/octet-stream"
