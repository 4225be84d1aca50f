"""
s3_deploy.invalidator — CloudFront cache invalidation.

Submits one batch covering every configured path matcher and reports the
invalidation id and status.  No retry and no polling; CloudFront finishes
the invalidation on its own schedule.
"""

from __future__ import annotations

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from s3_deploy.exceptions import ConfigurationError, InvalidationError
from s3_deploy.models import DeploymentOptions, InvalidationRequest, InvalidationResult

logger = Logger(service="s3-deploy")


def build_request(options: DeploymentOptions) -> InvalidationRequest:
    if not options.cloudfront_id:
        raise ConfigurationError("CloudFront distribution id is not set")
    return InvalidationRequest(
        distribution_id=options.cloudfront_id,
        paths=options.invalidation_paths,
        caller_reference=InvalidationRequest.new_caller_reference(),
    )


class CdnInvalidator:
    def __init__(self, cloudfront_client: Any) -> None:
        self._cloudfront = cloudfront_client

    def invalidate(self, options: DeploymentOptions) -> InvalidationResult:
        """Create an invalidation for options.cloudfront_matchers.

        Raises InvalidationError (code, message, request id) on failure.
        """
        return self.submit(build_request(options))

    def submit(self, request: InvalidationRequest) -> InvalidationResult:
        logger.info(
            f"Invalidating CloudFront distribution: {request.distribution_id}",
            distribution_id=request.distribution_id,
            paths=list(request.paths),
        )
        try:
            response = self._cloudfront.create_invalidation(
                DistributionId=request.distribution_id,
                InvalidationBatch=request.as_batch(),
            )
        except ClientError as exc:
            error = exc.response.get("Error", {})
            raise self._report(
                InvalidationError(
                    distribution_id=request.distribution_id,
                    code=str(error.get("Code", "Unknown")),
                    message=str(error.get("Message", exc)),
                    request_id=exc.response.get("ResponseMetadata", {}).get("RequestId"),
                )
            ) from exc
        except BotoCoreError as exc:
            raise self._report(
                InvalidationError(
                    distribution_id=request.distribution_id,
                    code=type(exc).__name__,
                    message=str(exc),
                )
            ) from exc

        try:
            invalidation = response["Invalidation"]
            result = InvalidationResult(
                invalidation_id=invalidation["Id"],
                status=invalidation["Status"],
                caller_reference=invalidation["InvalidationBatch"]["CallerReference"],
            )
        except (KeyError, TypeError) as exc:
            raise self._report(
                InvalidationError(
                    distribution_id=request.distribution_id,
                    code="MalformedResponse",
                    message=f"Unexpected CreateInvalidation response: {exc!r}",
                )
            ) from exc

        logger.info(f"Invalidation ID: {result.invalidation_id}")
        logger.info(f"Status: {result.status}")
        logger.info(f"Call Reference: {result.caller_reference}")
        logger.info("See your AWS console for on-going status on this invalidation.")
        return result

    @staticmethod
    def _report(error: InvalidationError) -> InvalidationError:
        logger.error("Cloudfront Error!", distribution_id=error.distribution_id)
        logger.error(f"Code: {error.code}")
        logger.error(f"Message: {error.message}")
        logger.error(f"AWS Request ID: {error.request_id}")
        return error
