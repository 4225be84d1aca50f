"""
s3_deploy.coordinator — End-to-end deployment run.

Sequence:
    1. Build S3/CloudFront clients for the configured profile and region.
    2. Provision the bucket; UNUSABLE aborts with ProvisioningError before any upload.
    3. Capture the task list (asset_match under asset_path).
    4. Upload with upload_concurrency workers.
    5. Invalidate CloudFront when enabled.  Awaited, but its failure is only
       reported: it never changes the verdict below.
    6. Reconcile: uploaded != total raises ReconciliationError.
"""

from __future__ import annotations

from pathlib import Path

from aws_lambda_powertools import Logger

from s3_deploy.aws import AwsClients, build_clients, transfer_config
from s3_deploy.exceptions import InvalidationError, ProvisioningError, ReconciliationError
from s3_deploy.files import build_tasks
from s3_deploy.invalidator import CdnInvalidator
from s3_deploy.models import DeploymentOptions, DeploymentReport
from s3_deploy.provisioner import BucketProvisioner
from s3_deploy.uploader import UploadWorkerPool

logger = Logger(service="s3-deploy")


class DeploymentCoordinator:
    """Runs one deployment.

    Collaborators may be injected (tests pass fakes); otherwise they are
    built from boto3 clients for options.region / options.aws_profile.
    """

    def __init__(
        self,
        options: DeploymentOptions,
        *,
        clients: AwsClients | None = None,
        provisioner: BucketProvisioner | None = None,
        pool: UploadWorkerPool | None = None,
        invalidator: CdnInvalidator | None = None,
        asset_root: Path | None = None,
    ) -> None:
        self.options = options
        if clients is None and any(c is None for c in (provisioner, pool, invalidator)):
            clients = build_clients(options)
        if provisioner is None:
            provisioner = BucketProvisioner(clients.s3)
        if pool is None:
            pool = UploadWorkerPool(clients.s3, options, transfer_config=transfer_config())
        if invalidator is None:
            invalidator = CdnInvalidator(clients.cloudfront)
        self._provisioner = provisioner
        self._pool = pool
        self._invalidator = invalidator
        self._asset_root = asset_root or options.full_asset_path

    def run(self) -> DeploymentReport:
        """Deploy and return the report.

        Raises:
            ProvisioningError:   bucket not usable; nothing was uploaded.
            ReconciliationError: some uploads failed.
            ConfigurationError:  asset path missing or pattern invalid.
        """
        options = self.options
        logger.info("Options", options=options.as_log_dict())

        bucket_state, hosting = self._provisioner.provision(options)
        if not bucket_state.permits_deploy:
            logger.error("Deployment terminated.", bucket=options.bucket)
            raise ProvisioningError(bucket=options.bucket, reason="bucket check failed")
        report = DeploymentReport(bucket_state=bucket_state, hosting=hosting)

        tasks = build_tasks(options, self._asset_root)
        logger.info(
            f"Deploying {len(tasks)} assets from {self._asset_root} to {options.remote_url()}",
            total=len(tasks),
            deploy_path=options.deploy_path,
        )

        summary = self._pool.run(tasks, options.concurrency)
        report.summary = summary

        if options.enable_cloudfront:
            try:
                report.invalidation = self._invalidator.invalidate(options)
            except InvalidationError as exc:
                report.invalidation_error = exc

        if not summary.reconciled:
            for outcome in summary.failures:
                logger.error(f"Not uploaded: {outcome.task.key}", key=outcome.task.key)
            raise ReconciliationError(
                uploaded=summary.uploaded,
                total=summary.total,
                failed_keys=tuple(outcome.task.key for outcome in summary.failures),
            )

        logger.info("Deployment complete.", uploaded=summary.uploaded, total=summary.total)
        return report
