"""
s3_deploy.uploader — Bounded-concurrency upload of a captured file list.

Workers share one list of FileTasks and pop from its end under a lock, so
each task is dispatched exactly once.  An upload failure is recorded as an
UploadOutcome carrying an UploadError; it never stops sibling workers.
The pool returns only after every task has been attempted.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from aws_lambda_powertools import Logger

from s3_deploy.content_type import content_type_for
from s3_deploy.exceptions import ConfigurationError, UploadError
from s3_deploy.models import (
    NO_CACHE_CONTROL,
    DeploymentOptions,
    FileTask,
    UploadOutcome,
    UploadSummary,
)

logger = Logger(service="s3-deploy")

UploadFn = Callable[[FileTask], None]


class UploadWorkerPool:
    """Uploads FileTasks to the deployment bucket with N concurrent workers."""

    def __init__(
        self,
        s3_client: Any,
        options: DeploymentOptions,
        *,
        transfer_config: Any = None,
    ) -> None:
        self._s3 = s3_client
        self._options = options
        self._transfer_config = transfer_config
        self._pwa_keys = options.pwa_keys

    def is_pwa_file(self, task: FileTask) -> bool:
        return task.relative_key in self._pwa_keys

    def extra_args(self, task: FileTask) -> dict[str, str]:
        """Object metadata: ACL, Content-Type and, for PWA files, no-cache Cache-Control."""
        args = {
            "ACL": self._options.acl,
            "ContentType": content_type_for(task.relative_key),
        }
        if self.is_pwa_file(task):
            args["CacheControl"] = NO_CACHE_CONTROL
        return args

    def upload(self, task: FileTask) -> None:
        """Upload one file.  Large files go multipart per the transfer config."""
        kwargs: dict[str, Any] = {"ExtraArgs": self.extra_args(task)}
        if self._transfer_config is not None:
            kwargs["Config"] = self._transfer_config
        with task.local_path.open("rb") as fh:
            self._s3.upload_fileobj(fh, self._options.bucket, task.key, **kwargs)

    def run(
        self,
        tasks: Sequence[FileTask],
        concurrency: int | None = None,
        upload_fn: UploadFn | None = None,
    ) -> UploadSummary:
        """Attempt every task once with at most `concurrency` uploads in flight.

        Returns the summary; summary.uploaded + summary.failed == len(tasks).
        """
        workers = self._options.concurrency if concurrency is None else concurrency
        if workers < 1:
            raise ConfigurationError(f"upload concurrency must be >= 1, got {workers}")
        upload_fn = upload_fn or self.upload

        pending = list(tasks)
        summary = UploadSummary(total=len(pending))
        lock = threading.Lock()

        def next_task() -> FileTask | None:
            with lock:
                return pending.pop() if pending else None

        def record(outcome: UploadOutcome) -> None:
            with lock:
                key = outcome.task.key
                if outcome.succeeded:
                    summary.uploaded += 1
                    pwa_str = ""
                    if self.is_pwa_file(outcome.task):
                        pwa_str = " with cache disabled for PWA"
                    logger.info(
                        f"({summary.uploaded}/{summary.total}) Uploaded {key}{pwa_str}", key=key
                    )
                else:
                    summary.failures.append(outcome)
                    logger.error(f"Upload failed: {key}", key=key)
                    logger.error(str(outcome.error), key=key)

        def attempt(task: FileTask) -> UploadOutcome:
            try:
                upload_fn(task)
            except Exception as exc:
                with lock:
                    done = summary.uploaded
                error = UploadError(key=task.key, index=done, total=summary.total, detail=str(exc))
                return UploadOutcome(task=task, error=error)
            return UploadOutcome(task=task)

        def drain() -> None:
            while True:
                task = next_task()
                if task is None:
                    return
                record(attempt(task))

        if not pending:
            return summary

        worker_count = min(workers, len(pending))
        with ThreadPoolExecutor(
            max_workers=worker_count, thread_name_prefix="s3-upload"
        ) as executor:
            futures = [executor.submit(drain) for _ in range(worker_count)]
            for future in futures:
                future.result()

        return summary
