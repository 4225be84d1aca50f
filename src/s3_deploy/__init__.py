"""
s3_deploy — Deploy a directory of static build artifacts to S3.

Checks (and optionally creates) the bucket, applies static website hosting,
uploads every matched file with bounded concurrency, reconciles the upload
count and optionally invalidates a CloudFront distribution.
"""

from s3_deploy.coordinator import DeploymentCoordinator
from s3_deploy.exceptions import (
    ConfigurationError,
    DeployError,
    HostingConfigError,
    InvalidationError,
    ProvisioningError,
    ReconciliationError,
    UploadError,
)
from s3_deploy.models import BucketState, DeploymentOptions, DeploymentReport

__all__ = [
    "BucketState",
    "ConfigurationError",
    "DeployError",
    "DeploymentCoordinator",
    "DeploymentOptions",
    "DeploymentReport",
    "HostingConfigError",
    "InvalidationError",
    "ProvisioningError",
    "ReconciliationError",
    "UploadError",
]
