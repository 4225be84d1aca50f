"""
tests/unit/test_models.py — Constraint tests for s3_deploy.models.

Validates:
- deploy_path normalisation (no leading slash, one trailing slash, or empty)
- upload_concurrency parsing and rejection of values < 1
- CloudFront / website configuration validation
- PWA key set and invalidation path parsing
- BucketState gating and DeploymentReport exit codes
- Frozen dataclass immutability
"""

import dataclasses
from pathlib import Path

import pytest
from s3_deploy.exceptions import ConfigurationError
from s3_deploy.models import (
    NO_CACHE_CONTROL,
    BucketState,
    DeploymentOptions,
    DeploymentReport,
    FileTask,
    InvalidationRequest,
    UploadSummary,
    normalize_deploy_path,
)

# ---------------------------------------------------------------------------
# normalize_deploy_path
# ---------------------------------------------------------------------------


class TestNormalizeDeployPath:
    def test_leading_slash_removed_and_trailing_added(self):
        assert normalize_deploy_path("/assets") == "assets/"

    def test_trailing_slash_added(self):
        assert normalize_deploy_path("assets") == "assets/"

    def test_empty_stays_empty(self):
        assert normalize_deploy_path("") == ""

    def test_root_slash_is_empty(self):
        assert normalize_deploy_path("/") == ""

    def test_already_normalised_unchanged(self):
        assert normalize_deploy_path("app/v2/") == "app/v2/"

    def test_repeated_slashes_collapse_at_edges(self):
        assert normalize_deploy_path("//app/v2//") == "app/v2/"


# ---------------------------------------------------------------------------
# DeploymentOptions
# ---------------------------------------------------------------------------


class TestDeploymentOptions:
    def test_defaults(self):
        options = DeploymentOptions(bucket="b")
        assert options.acl == "public-read"
        assert options.deploy_path == ""
        assert options.concurrency == 5
        assert options.asset_match == "**"
        assert options.create_bucket is False
        assert options.enable_cloudfront is False

    def test_deploy_path_normalised_on_construction(self):
        assert DeploymentOptions(bucket="b", deploy_path="/assets").deploy_path == "assets/"

    def test_concurrency_accepts_string(self):
        options = DeploymentOptions(bucket="b", upload_concurrency="8")
        assert options.upload_concurrency == 8
        assert options.concurrency == 8

    @pytest.mark.parametrize("value", [0, -1, "0", "-3"])
    def test_concurrency_below_one_rejected(self, value):
        with pytest.raises(ConfigurationError, match=">= 1"):
            DeploymentOptions(bucket="b", upload_concurrency=value)

    @pytest.mark.parametrize("value", ["", "five", "2.5", None])
    def test_concurrency_not_integer_rejected(self, value):
        with pytest.raises(ConfigurationError, match="integer"):
            DeploymentOptions(bucket="b", upload_concurrency=value)

    def test_empty_bucket_rejected(self):
        with pytest.raises(ConfigurationError, match="bucket"):
            DeploymentOptions(bucket="  ")

    def test_cloudfront_requires_distribution_id(self):
        with pytest.raises(ConfigurationError, match="distribution id"):
            DeploymentOptions(bucket="b", enable_cloudfront=True)

    def test_cloudfront_requires_matchers(self):
        with pytest.raises(ConfigurationError, match="matchers"):
            DeploymentOptions(
                bucket="b", enable_cloudfront=True, cloudfront_id="E123", cloudfront_matchers=" , "
            )

    def test_custom_website_configuration_must_be_object(self):
        with pytest.raises(ConfigurationError, match="JSON object"):
            DeploymentOptions(bucket="b", static_website_configuration=["not", "a", "dict"])

    def test_frozen(self):
        options = DeploymentOptions(bucket="b")
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.bucket = "other"  # type: ignore[misc]

    def test_pwa_keys_empty_when_pwa_disabled(self):
        options = DeploymentOptions(bucket="b", pwa=False, pwa_files="index.html")
        assert options.pwa_keys == frozenset()

    def test_pwa_keys_parsed_and_trimmed(self):
        options = DeploymentOptions(bucket="b", pwa=True, pwa_files="index.html, sw.js,,")
        assert options.pwa_keys == frozenset({"index.html", "sw.js"})

    def test_invalidation_paths_keep_order(self):
        options = DeploymentOptions(bucket="b", cloudfront_matchers="/index.html,/app/*")
        assert options.invalidation_paths == ("/index.html", "/app/*")

    def test_default_website_configuration(self):
        options = DeploymentOptions(
            bucket="b", static_index_page="index.html", static_error_page="404.html"
        )
        assert options.website_configuration() == {
            "ErrorDocument": {"Key": "404.html"},
            "IndexDocument": {"Suffix": "index.html"},
        }

    def test_custom_website_configuration_used_verbatim(self):
        custom = {"RedirectAllRequestsTo": {"HostName": "example.com"}}
        options = DeploymentOptions(bucket="b", static_website_configuration=custom)
        assert options.website_configuration() == custom

    def test_full_asset_path_absolute_unchanged(self, tmp_path: Path):
        options = DeploymentOptions(bucket="b", asset_path=str(tmp_path))
        assert options.full_asset_path == tmp_path.resolve()

    def test_remote_url_website_endpoint_when_hosting(self):
        options = DeploymentOptions(bucket="b", region="eu-west-2", static_hosting=True)
        assert options.remote_url() == "http://b.s3-website-eu-west-2.amazonaws.com/"

    def test_log_dict_contains_normalised_values(self):
        log = DeploymentOptions(bucket="b", deploy_path="/x", upload_concurrency="3").as_log_dict()
        assert log["deployPath"] == "x/"
        assert log["uploadConcurrency"] == 3


# ---------------------------------------------------------------------------
# BucketState / UploadSummary / DeploymentReport
# ---------------------------------------------------------------------------


class TestBucketState:
    def test_usable_and_created_permit_deploy(self):
        assert BucketState.USABLE.permits_deploy is True
        assert BucketState.CREATED.permits_deploy is True

    def test_unusable_blocks_deploy(self):
        assert BucketState.UNUSABLE.permits_deploy is False


class TestDeploymentReport:
    def test_exit_code_zero_when_reconciled(self):
        report = DeploymentReport(
            bucket_state=BucketState.USABLE, summary=UploadSummary(total=2, uploaded=2)
        )
        assert report.succeeded is True
        assert report.exit_code == 0

    def test_exit_code_non_zero_on_mismatch(self):
        report = DeploymentReport(
            bucket_state=BucketState.USABLE, summary=UploadSummary(total=2, uploaded=1)
        )
        assert report.exit_code == 1

    def test_exit_code_non_zero_without_summary(self):
        assert DeploymentReport(bucket_state=BucketState.CREATED).exit_code == 1

    def test_empty_run_reconciles(self):
        assert UploadSummary(total=0).reconciled is True


# ---------------------------------------------------------------------------
# InvalidationRequest
# ---------------------------------------------------------------------------


class TestInvalidationRequest:
    def test_caller_reference_unique(self):
        refs = {InvalidationRequest.new_caller_reference() for _ in range(50)}
        assert len(refs) == 50

    def test_caller_reference_prefixed(self):
        assert InvalidationRequest.new_caller_reference().startswith("s3-deploy-")

    def test_batch_shape(self):
        request = InvalidationRequest(
            distribution_id="E1", paths=("/a", "/b"), caller_reference="ref-1"
        )
        assert request.as_batch() == {
            "CallerReference": "ref-1",
            "Paths": {"Quantity": 2, "Items": ["/a", "/b"]},
        }


def test_no_cache_directive_value():
    assert NO_CACHE_CONTROL == "no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0"


def test_file_task_is_frozen(tmp_path: Path):
    task = FileTask(local_path=tmp_path / "a", relative_key="a", key="a")
    with pytest.raises(dataclasses.FrozenInstanceError):
        task.key = "b"  # type: ignore[misc]
