"""
s3_deploy.provisioner — Bucket readiness check, creation and static hosting.

State machine:

    Unknown ──head_bucket ok────────────────────────────▶ USABLE
            ──403─────────────────────────────────────────▶ UNUSABLE
            ──404 ──create_bucket set ──create ok────────▶ CREATED
                                      ──create failed────▶ UNUSABLE
                  ──create_bucket unset──────────────────▶ UNUSABLE
            ──anything else───────────────────────────────▶ UNUSABLE

USABLE | CREATED then optionally apply the website configuration.  A
rejected website configuration is logged and does not block upload.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from s3_deploy.exceptions import HostingConfigError
from s3_deploy.models import BucketState, DeploymentOptions, HostingState

logger = Logger(service="s3-deploy")

_FORBIDDEN_CODES = frozenset({"403", "Forbidden", "AccessDenied"})
_NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchBucket"})
_REGION_WITHOUT_LOCATION_CONSTRAINT = "us-east-1"


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def is_forbidden(error: ClientError) -> bool:
    return _error_code(error) in _FORBIDDEN_CODES


def is_not_found(error: ClientError) -> bool:
    return _error_code(error) in _NOT_FOUND_CODES


class BucketProvisioner:
    """Ensures the deployment bucket exists and is configured for hosting."""

    def __init__(self, s3_client: Any) -> None:
        self._s3 = s3_client

    def ensure_bucket(self, options: DeploymentOptions) -> BucketState:
        """Check the bucket, creating it when absent and create_bucket is set."""
        bucket = options.bucket
        try:
            self._s3.head_bucket(Bucket=bucket)
        except ClientError as exc:
            if is_forbidden(exc):
                logger.error(
                    f"Bucket: {bucket} exists, but you do not have permission to access it.",
                    bucket=bucket,
                )
                return BucketState.UNUSABLE
            if is_not_found(exc):
                if options.create_bucket:
                    logger.info(
                        f"Bucket: {bucket} does not exist, attempting to create.", bucket=bucket
                    )
                    return self.create_bucket(options)
                logger.error(f"Bucket: {bucket} does not exist.", bucket=bucket)
                return BucketState.UNUSABLE
            logger.error(
                f"Could not verify that bucket {bucket} exists. AWS Error: {exc}.", bucket=bucket
            )
            return BucketState.UNUSABLE
        except BotoCoreError as exc:
            logger.error(
                f"Could not verify that bucket {bucket} exists. AWS Error: {exc}.", bucket=bucket
            )
            return BucketState.UNUSABLE

        logger.info(f"Bucket: {bucket} exists.", bucket=bucket)
        return BucketState.USABLE

    def create_bucket(self, options: DeploymentOptions) -> BucketState:
        kwargs: dict[str, Any] = {"Bucket": options.bucket, "ACL": options.acl}
        if options.region != _REGION_WITHOUT_LOCATION_CONSTRAINT:
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": options.region}
        try:
            self._s3.create_bucket(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                f"Bucket: {options.bucket} could not be created. AWS Error: {exc}.",
                bucket=options.bucket,
            )
            return BucketState.UNUSABLE

        logger.info(f"Bucket: {options.bucket} created.", bucket=options.bucket)
        return BucketState.CREATED

    def enable_static_hosting(self, options: DeploymentOptions) -> None:
        """Apply the website configuration.

        Raises HostingConfigError if S3 rejects it.
        """
        try:
            self._s3.put_bucket_website(
                Bucket=options.bucket,
                WebsiteConfiguration=options.website_configuration(),
            )
        except (ClientError, BotoCoreError) as exc:
            raise HostingConfigError(bucket=options.bucket, detail=str(exc)) from exc
        logger.info("Static Hosting is enabled.", bucket=options.bucket)

    def provision(self, options: DeploymentOptions) -> tuple[BucketState, HostingState]:
        """ensure_bucket, then static hosting when requested and the bucket is usable."""
        state = self.ensure_bucket(options)
        if not state.permits_deploy or not options.static_hosting:
            return state, HostingState.SKIPPED
        try:
            self.enable_static_hosting(options)
        except HostingConfigError as exc:
            logger.error(str(exc), bucket=options.bucket)
            return state, HostingState.FAILED
        return state, HostingState.APPLIED
