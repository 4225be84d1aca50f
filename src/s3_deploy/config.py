"""
s3_deploy.config — Build DeploymentOptions from environment variables.

Every option has an S3_DEPLOY_* variable (region and profile use the
standard AWS_* names).  Explicit overrides, typically parsed CLI flags,
win over the environment; None means "not given".
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from s3_deploy.exceptions import ConfigurationError
from s3_deploy.models import (
    DEFAULT_ACL,
    DEFAULT_ASSET_MATCH,
    DEFAULT_ASSET_PATH,
    DEFAULT_CLOUDFRONT_MATCHERS,
    DEFAULT_DEPLOY_PATH,
    DEFAULT_ERROR_PAGE,
    DEFAULT_INDEX_PAGE,
    DEFAULT_PROFILE,
    DEFAULT_PWA_FILES,
    DEFAULT_REGION,
    DEFAULT_UPLOAD_CONCURRENCY,
    DeploymentOptions,
)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})

# option field -> (environment variable, default)
ENV_VARS: dict[str, tuple[str, Any]] = {
    "bucket": ("S3_DEPLOY_BUCKET", ""),
    "acl": ("S3_DEPLOY_ACL", DEFAULT_ACL),
    "create_bucket": ("S3_DEPLOY_CREATE_BUCKET", False),
    "static_hosting": ("S3_DEPLOY_STATIC_HOSTING", False),
    "static_index_page": ("S3_DEPLOY_STATIC_INDEX_PAGE", DEFAULT_INDEX_PAGE),
    "static_error_page": ("S3_DEPLOY_STATIC_ERROR_PAGE", DEFAULT_ERROR_PAGE),
    "asset_path": ("S3_DEPLOY_ASSET_PATH", DEFAULT_ASSET_PATH),
    "asset_match": ("S3_DEPLOY_ASSET_MATCH", DEFAULT_ASSET_MATCH),
    "deploy_path": ("S3_DEPLOY_DEPLOY_PATH", DEFAULT_DEPLOY_PATH),
    "upload_concurrency": ("S3_DEPLOY_UPLOAD_CONCURRENCY", DEFAULT_UPLOAD_CONCURRENCY),
    "enable_cloudfront": ("S3_DEPLOY_ENABLE_CLOUDFRONT", False),
    "cloudfront_id": ("S3_DEPLOY_CLOUDFRONT_ID", None),
    "cloudfront_matchers": ("S3_DEPLOY_CLOUDFRONT_MATCHERS", DEFAULT_CLOUDFRONT_MATCHERS),
    "pwa": ("S3_DEPLOY_PWA", False),
    "pwa_files": ("S3_DEPLOY_PWA_FILES", DEFAULT_PWA_FILES),
}
WEBSITE_CONFIG_ENV = "S3_DEPLOY_WEBSITE_CONFIG"


def parse_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Expected a boolean value, got {value!r}")


def resolve_region(environ: Mapping[str, str]) -> str:
    return (
        environ.get("AWS_REGION", "").strip()
        or environ.get("AWS_DEFAULT_REGION", "").strip()
        or DEFAULT_REGION
    )


def load_website_configuration(path: str | Path) -> dict[str, Any]:
    """Read a custom S3 WebsiteConfiguration document from a JSON file."""
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigurationError(f"Website configuration file not found: {config_path}")
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Website configuration in {config_path} must be a JSON object")
    return data


def load_options(
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> DeploymentOptions:
    """Merge defaults, environment and overrides into validated DeploymentOptions.

    overrides keys are DeploymentOptions field names plus "region",
    "aws_profile" and "website_config_path".  None values are ignored.
    """
    env = os.environ if environ is None else environ
    given = {k: v for k, v in (overrides or {}).items() if v is not None}

    values: dict[str, Any] = {}
    for field_name, (env_name, default) in ENV_VARS.items():
        if field_name in given:
            value = given[field_name]
        else:
            value = env.get(env_name, default)
        if isinstance(default, bool):
            value = parse_bool(value)
        values[field_name] = value

    values["region"] = given.get("region") or resolve_region(env)
    values["aws_profile"] = given.get("aws_profile") or env.get("AWS_PROFILE") or DEFAULT_PROFILE

    website_config_path = given.get("website_config_path") or env.get(WEBSITE_CONFIG_ENV)
    if website_config_path:
        values["static_website_configuration"] = load_website_configuration(website_config_path)

    return DeploymentOptions(**values)
