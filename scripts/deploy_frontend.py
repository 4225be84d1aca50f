#!/usr/bin/env python3
"""
deploy_frontend.py — Deploy static build output to S3 and invalidate CloudFront.

Checks the target bucket (creating it with --create-bucket), optionally
enables static website hosting, uploads every file matching --asset-match
under --asset-path to --deploy-path, then invalidates the configured
CloudFront paths when --enable-cloudfront is set.

Options default to S3_DEPLOY_* environment variables; see s3_deploy.config.

Exit codes:
    0  Every file uploaded
    1  Bucket unusable, or fewer files uploaded than found locally
    2  Invalid configuration

Usage:
    uv run python scripts/deploy_frontend.py --bucket <bucket> --asset-path dist
    uv run python scripts/deploy_frontend.py --bucket <bucket> --pwa \\
        --enable-cloudfront --cloudfront-id <distribution-id>
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from s3_deploy import (
    ConfigurationError,
    DeployError,
    DeploymentCoordinator,
    ProvisioningError,
    ReconciliationError,
)
from s3_deploy.config import load_options


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Deploy static assets to S3 and optionally invalidate CloudFront"
    )
    bool_flag = argparse.BooleanOptionalAction

    target = parser.add_argument_group("bucket")
    target.add_argument("--bucket", default=None, help="Target S3 bucket name")
    target.add_argument("--region", default=None, help="AWS region (default AWS_REGION)")
    target.add_argument("--profile", dest="aws_profile", default=None, help="AWS profile name")
    target.add_argument("--acl", default=None, help="Canned ACL for bucket and objects")
    target.add_argument("--create-bucket", action=bool_flag, default=None)
    target.add_argument("--static-hosting", action=bool_flag, default=None)
    target.add_argument("--static-index-page", default=None, help="Index document suffix")
    target.add_argument("--static-error-page", default=None, help="Error document key")
    target.add_argument(
        "--website-config",
        dest="website_config_path",
        default=None,
        help="JSON file with a full S3 WebsiteConfiguration (overrides index/error pages)",
    )

    assets = parser.add_argument_group("assets")
    assets.add_argument("--asset-path", default=None, help="Local build directory")
    assets.add_argument("--asset-match", default=None, help="Glob relative to --asset-path")
    assets.add_argument("--deploy-path", default=None, help="Remote key prefix")
    assets.add_argument(
        "--upload-concurrency", default=None, help="Number of concurrent uploads (>= 1)"
    )

    cdn = parser.add_argument_group("cloudfront")
    cdn.add_argument("--enable-cloudfront", action=bool_flag, default=None)
    cdn.add_argument("--cloudfront-id", default=None, help="CloudFront distribution id")
    cdn.add_argument(
        "--cloudfront-matchers", default=None, help="Comma-separated invalidation paths"
    )

    pwa = parser.add_argument_group("pwa")
    pwa.add_argument("--pwa", action=bool_flag, default=None)
    pwa.add_argument(
        "--pwa-files", default=None, help="Comma-separated keys uploaded with caching disabled"
    )
    return parser.parse_args(argv)


def run(overrides: dict[str, Any]) -> int:
    options = load_options(overrides=overrides)
    report = DeploymentCoordinator(options).run()
    return report.exit_code


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    try:
        return run(vars(args))
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except ProvisioningError as exc:
        print("Deployment terminated.", file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return 1
    except ReconciliationError as exc:
        print("Deployment completed with errors.", file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return 1
    except DeployError as exc:
        print(f"Deployment failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
