"""
s3_deploy.models — Run options and per-run records as Python dataclasses.

Defines the data flowing between the deployment components:

    DeploymentOptions    — immutable settings for one run (validated on construction)
    FileTask             — local file paired with its remote object key
    UploadOutcome        — success/failure of a single FileTask
    UploadSummary        — fan-in of all outcomes for a run
    BucketState          — result of the bucket readiness check
    InvalidationRequest  — one CloudFront invalidation batch
    InvalidationResult   — identifier/status returned by CloudFront
    DeploymentReport     — everything the coordinator learned during a run
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any
from uuid import uuid4

from s3_deploy.exceptions import ConfigurationError, InvalidationError, UploadError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
NO_CACHE_CONTROL: str = "no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0"
CALLER_REFERENCE_PREFIX: str = "s3-deploy"

MULTIPART_PART_SIZE: int = 5 * 1024 * 1024  # 5 MiB
MULTIPART_QUEUE_SIZE: int = 4
CONNECT_TIMEOUT_SECONDS: int = 30
READ_TIMEOUT_SECONDS: int = 120

DEFAULT_REGION: str = "us-east-1"
DEFAULT_PROFILE: str = "default"
DEFAULT_ACL: str = "public-read"
DEFAULT_INDEX_PAGE: str = "index.html"
DEFAULT_ERROR_PAGE: str = "index.html"
DEFAULT_ASSET_PATH: str = "dist"
DEFAULT_ASSET_MATCH: str = "**"
DEFAULT_DEPLOY_PATH: str = "/"
DEFAULT_UPLOAD_CONCURRENCY: int = 5
DEFAULT_CLOUDFRONT_MATCHERS: str = "/index.html,/service-worker.js,/manifest.json"
DEFAULT_PWA_FILES: str = "index.html,service-worker.js,manifest.json"


def normalize_deploy_path(deploy_path: str) -> str:
    """Return deploy_path with no leading slash and exactly one trailing slash.

    The empty string (and "/") normalise to "" — a root deploy.
    """
    path = deploy_path.strip().strip("/")
    if not path:
        return ""
    return f"{path}/"


def split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BucketState(StrEnum):
    """Bucket readiness.

    Unknown → USABLE | CREATED | UNUSABLE.  Only USABLE and CREATED allow
    the run to continue to upload.
    """

    USABLE = "usable"
    CREATED = "created"
    UNUSABLE = "unusable"

    @property
    def permits_deploy(self) -> bool:
        return self is not BucketState.UNUSABLE


class HostingState(StrEnum):
    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# DeploymentOptions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DeploymentOptions:
    """Settings for a single deployment run.

    upload_concurrency accepts a string-encoded integer (environment and CLI
    values arrive as text) and is stored as int.  deploy_path is stored in
    normalised form.  Raises ConfigurationError on invalid combinations.
    """

    bucket: str
    region: str = DEFAULT_REGION
    aws_profile: str = DEFAULT_PROFILE
    acl: str = DEFAULT_ACL
    create_bucket: bool = False
    static_hosting: bool = False
    static_index_page: str = DEFAULT_INDEX_PAGE
    static_error_page: str = DEFAULT_ERROR_PAGE
    static_website_configuration: dict[str, Any] | None = None
    asset_path: str = DEFAULT_ASSET_PATH
    asset_match: str = DEFAULT_ASSET_MATCH
    deploy_path: str = DEFAULT_DEPLOY_PATH
    upload_concurrency: int | str = DEFAULT_UPLOAD_CONCURRENCY
    enable_cloudfront: bool = False
    cloudfront_id: str | None = None
    cloudfront_matchers: str = DEFAULT_CLOUDFRONT_MATCHERS
    pwa: bool = False
    pwa_files: str = DEFAULT_PWA_FILES

    def __post_init__(self) -> None:
        if not self.bucket or not self.bucket.strip():
            raise ConfigurationError("bucket name must not be empty")
        if not self.region:
            raise ConfigurationError("region must not be empty")

        try:
            concurrency = int(self.upload_concurrency)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"upload concurrency must be an integer, got {self.upload_concurrency!r}"
            ) from exc
        if concurrency < 1:
            raise ConfigurationError(f"upload concurrency must be >= 1, got {concurrency}")
        object.__setattr__(self, "upload_concurrency", concurrency)

        object.__setattr__(self, "deploy_path", normalize_deploy_path(self.deploy_path))

        if self.enable_cloudfront and not self.cloudfront_id:
            raise ConfigurationError("CloudFront invalidation enabled but no distribution id set")
        if self.enable_cloudfront and not split_csv(self.cloudfront_matchers):
            raise ConfigurationError("CloudFront invalidation enabled but no path matchers set")
        if self.static_website_configuration is not None and not isinstance(
            self.static_website_configuration, dict
        ):
            raise ConfigurationError("custom website configuration must be a JSON object")

    @property
    def concurrency(self) -> int:
        return int(self.upload_concurrency)

    @property
    def full_asset_path(self) -> Path:
        """Absolute asset root; relative paths resolve against the working directory."""
        return (Path.cwd() / self.asset_path).resolve()

    @property
    def pwa_keys(self) -> frozenset[str]:
        if not self.pwa:
            return frozenset()
        return frozenset(split_csv(self.pwa_files))

    @property
    def invalidation_paths(self) -> tuple[str, ...]:
        return split_csv(self.cloudfront_matchers)

    def website_configuration(self) -> dict[str, Any]:
        """Website configuration to apply: the custom one verbatim, else index/error docs."""
        if self.static_website_configuration:
            return self.static_website_configuration
        return {
            "ErrorDocument": {"Key": self.static_error_page},
            "IndexDocument": {"Suffix": self.static_index_page},
        }

    def remote_url(self) -> str:
        if self.static_hosting:
            return f"http://{self.bucket}.s3-website-{self.region}.amazonaws.com/"
        return f"https://s3.{self.region}.amazonaws.com/{self.bucket}/"

    def as_log_dict(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket,
            "region": self.region,
            "awsProfile": self.aws_profile,
            "acl": self.acl,
            "createBucket": self.create_bucket,
            "staticHosting": self.static_hosting,
            "staticIndexPage": self.static_index_page,
            "staticErrorPage": self.static_error_page,
            "customWebsiteConfiguration": self.static_website_configuration is not None,
            "assetPath": self.asset_path,
            "assetMatch": self.asset_match,
            "deployPath": self.deploy_path,
            "uploadConcurrency": self.concurrency,
            "enableCloudfront": self.enable_cloudfront,
            "cloudfrontId": self.cloudfront_id,
            "cloudfrontMatchers": self.cloudfront_matchers,
            "pwa": self.pwa,
            "pwaFiles": self.pwa_files,
        }


# ---------------------------------------------------------------------------
# FileTask / UploadOutcome / UploadSummary
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileTask:
    """A local file and the object key it is uploaded to.

    relative_key: path under the asset root, forward-slash separated.
    key:          relative_key with the normalised deploy path prepended.
    """

    local_path: Path
    relative_key: str
    key: str


@dataclass(frozen=True)
class UploadOutcome:
    task: FileTask
    error: UploadError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class UploadSummary:
    """Fan-in of a pool run.

    total is fixed when the pool starts; uploaded only ever grows.
    """

    total: int
    uploaded: int = 0
    failures: list[UploadOutcome] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def reconciled(self) -> bool:
        return self.uploaded == self.total


# ---------------------------------------------------------------------------
# CloudFront invalidation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvalidationRequest:
    """One invalidation batch.

    caller_reference must be unique per CreateInvalidation call;
    new_caller_reference() combines the current time in milliseconds with a
    random suffix.
    """

    distribution_id: str
    paths: tuple[str, ...]
    caller_reference: str

    @staticmethod
    def new_caller_reference() -> str:
        return f"{CALLER_REFERENCE_PREFIX}-{time.time_ns() // 1_000_000}-{uuid4().hex[:8]}"

    def as_batch(self) -> dict[str, Any]:
        return {
            "CallerReference": self.caller_reference,
            "Paths": {"Quantity": len(self.paths), "Items": list(self.paths)},
        }


@dataclass(frozen=True)
class InvalidationResult:
    invalidation_id: str
    status: str
    caller_reference: str


# ---------------------------------------------------------------------------
# DeploymentReport
# ---------------------------------------------------------------------------


@dataclass
class DeploymentReport:
    """What a run did.  exit_code is 0 only when every upload reconciled."""

    bucket_state: BucketState
    hosting: HostingState = HostingState.SKIPPED
    summary: UploadSummary | None = None
    invalidation: InvalidationResult | None = None
    invalidation_error: InvalidationError | None = None

    @property
    def succeeded(self) -> bool:
        return (
            self.bucket_state.permits_deploy
            and self.summary is not None
            and self.summary.reconciled
        )

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
