"""
s3_deploy.exceptions — Deployment error taxonomy.

Fatal (propagate to the CLI and set a non-zero exit status):
    ConfigurationError, ProvisioningError, ReconciliationError
Non-fatal (logged where they happen, run continues):
    HostingConfigError, UploadError, InvalidationError
"""

from __future__ import annotations


class DeployError(RuntimeError):
    """Base class for deployment errors."""


class ConfigurationError(DeployError):
    """Raised when deployment options are missing or invalid."""


class ProvisioningError(DeployError):
    """Raised when the target bucket is not usable and nothing may be uploaded."""

    def __init__(self, *, bucket: str, reason: str) -> None:
        self.bucket = bucket
        self.reason = reason
        super().__init__(f"Bucket {bucket!r} is not usable: {reason}")


class HostingConfigError(DeployError):
    """Raised when the static website configuration is rejected."""

    def __init__(self, *, bucket: str, detail: str) -> None:
        self.bucket = bucket
        self.detail = detail
        super().__init__(
            f"Static Hosting could not be enabled on bucket: {bucket}. AWS Error: {detail}."
        )


class UploadError(DeployError):
    """A single object upload failed.

    Attributes:
        key:    Full remote object key that failed.
        index:  Number of files uploaded when the failure was recorded.
        total:  Number of files in the run.
        detail: Vendor error text.
    """

    def __init__(self, *, key: str, index: int, total: int, detail: str) -> None:
        self.key = key
        self.index = index
        self.total = total
        self.detail = detail
        super().__init__(f"({index}/{total}) Upload failed: {key}. AWS Error: {detail}.")


class ReconciliationError(DeployError):
    """Raised when fewer files were uploaded than were found locally."""

    def __init__(self, *, uploaded: int, total: int, failed_keys: tuple[str, ...] = ()) -> None:
        self.uploaded = uploaded
        self.total = total
        self.failed_keys = failed_keys
        super().__init__(
            f"Not all files were uploaded. {uploaded} out of {total} files were uploaded."
        )


class InvalidationError(DeployError):
    """CloudFront rejected or failed the invalidation request."""

    def __init__(
        self,
        *,
        distribution_id: str,
        code: str,
        message: str,
        request_id: str | None = None,
    ) -> None:
        self.distribution_id = distribution_id
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(
            f"CloudFront invalidation failed for {distribution_id}: "
            f"{code}: {message} (request id: {request_id or 'unknown'})"
        )
