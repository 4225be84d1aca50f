"""Shared fixtures: fake AWS credentials and a populated asset directory."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import boto3
import pytest
from moto import mock_aws

REGION = "eu-west-2"
BUCKET = "platform-spa-assets"


@pytest.fixture(autouse=True)
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set minimal AWS env vars required by boto3 and moto; clear deploy settings."""
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    for name in [n for n in os.environ if n.startswith("S3_DEPLOY_")]:
        monkeypatch.delenv(name, raising=False)


def _write_files(root: Path, files: dict[str, str]) -> list[Path]:
    paths = []
    for rel, body in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
        paths.append(path)
    return paths


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """dist/ with three files: index.html, css/app.css, js/app.js."""
    root = tmp_path / "dist"
    _write_files(
        root,
        {
            "index.html": "<html></html>",
            "css/app.css": "body {}",
            "js/app.js": "console.log(1)",
        },
    )
    return root


@pytest.fixture
def s3() -> Iterator[Any]:
    """moto S3 client with BUCKET already created."""
    with mock_aws():
        client = boto3.client("s3", region_name=REGION)
        client.create_bucket(
            Bucket=BUCKET,
            CreateBucketConfiguration={"LocationConstraint": REGION},
        )
        yield client
