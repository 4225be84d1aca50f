"""
s3_deploy.aws — boto3 session and client construction.

One S3 client and one CloudFront client are built per run and passed
explicitly to the components that need them.  Every call carries a
30s connect / 120s read timeout; large objects are sent as multipart
uploads in 5 MiB parts, 4 parts at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import ProfileNotFound

from s3_deploy.exceptions import ConfigurationError
from s3_deploy.models import (
    CONNECT_TIMEOUT_SECONDS,
    DEFAULT_PROFILE,
    MULTIPART_PART_SIZE,
    MULTIPART_QUEUE_SIZE,
    READ_TIMEOUT_SECONDS,
    DeploymentOptions,
)


def client_config(max_pool_connections: int = 10) -> Config:
    return Config(
        connect_timeout=CONNECT_TIMEOUT_SECONDS,
        read_timeout=READ_TIMEOUT_SECONDS,
        retries={"max_attempts": 3, "mode": "standard"},
        max_pool_connections=max_pool_connections,
    )


def transfer_config() -> TransferConfig:
    return TransferConfig(
        multipart_threshold=MULTIPART_PART_SIZE,
        multipart_chunksize=MULTIPART_PART_SIZE,
        max_concurrency=MULTIPART_QUEUE_SIZE,
    )


def build_session(options: DeploymentOptions) -> boto3.session.Session:
    """Session for the configured region; a non-default profile selects shared credentials."""
    if options.aws_profile and options.aws_profile != DEFAULT_PROFILE:
        try:
            return boto3.session.Session(
                profile_name=options.aws_profile, region_name=options.region
            )
        except ProfileNotFound as exc:
            raise ConfigurationError(str(exc)) from exc
    return boto3.session.Session(region_name=options.region)


@dataclass(frozen=True)
class AwsClients:
    s3: Any
    cloudfront: Any


def build_clients(options: DeploymentOptions, session: Any = None) -> AwsClients:
    """Create the S3 and CloudFront clients for a run.

    The S3 connection pool is sized for every worker running a full
    multipart upload at once.
    """
    session = session or build_session(options)
    pool_size = max(10, options.concurrency * MULTIPART_QUEUE_SIZE)
    s3 = session.client("s3", region_name=options.region, config=client_config(pool_size))
    cloudfront = session.client("cloudfront", config=client_config())
    return AwsClients(s3=s3, cloudfront=cloudfront)
