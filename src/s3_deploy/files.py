"""
s3_deploy.files — Local asset enumeration and remote key derivation.

The task list is captured once per run.  Keys are built from the path
relative to the asset root with PurePath.as_posix(), which only rewrites
real path separators; two distinct files can never map to the same key.
"""

from __future__ import annotations

from pathlib import Path

from s3_deploy.exceptions import ConfigurationError
from s3_deploy.models import DeploymentOptions, FileTask, normalize_deploy_path


def _expand_pattern(pattern: str) -> str:
    # pathlib's "**" alone matches directories only (before 3.13); the
    # globby-style meaning is "every file below the root".
    pattern = pattern.strip() or "**"
    if pattern == "**" or pattern.endswith("/**"):
        return f"{pattern}/*"
    return pattern


def _names_dot_segment(pattern: str) -> bool:
    return any(part.startswith(".") for part in Path(pattern).parts)


def _is_hidden(path: Path, asset_root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(asset_root).parts)


def find_files(asset_root: Path, pattern: str) -> list[Path]:
    """Return every regular file under asset_root matching pattern, sorted.

    Hidden files and anything under a hidden directory are skipped unless
    the pattern itself names a dot segment (e.g. ".well-known/**").

    Raises ConfigurationError when asset_root is not a directory or the
    pattern is absolute or climbs out of asset_root.
    """
    if not asset_root.is_dir():
        raise ConfigurationError(f"Asset path does not exist or is not a directory: {asset_root}")
    if Path(pattern).is_absolute():
        raise ConfigurationError(f"Asset match pattern must be relative: {pattern!r}")
    if ".." in Path(pattern).parts:
        raise ConfigurationError(f"Asset match pattern must not contain '..': {pattern!r}")
    include_hidden = _names_dot_segment(pattern)
    return sorted(
        {
            path
            for path in asset_root.glob(_expand_pattern(pattern))
            if path.is_file() and (include_hidden or not _is_hidden(path, asset_root))
        }
    )


def relative_key(local_path: Path, asset_root: Path) -> str:
    return local_path.relative_to(asset_root).as_posix()


def remote_key(local_path: Path, asset_root: Path, deploy_path: str) -> str:
    """Object key for local_path: deploy prefix + forward-slash relative path."""
    return f"{normalize_deploy_path(deploy_path)}{relative_key(local_path, asset_root)}"


def build_tasks(options: DeploymentOptions, asset_root: Path | None = None) -> list[FileTask]:
    root = asset_root or options.full_asset_path
    tasks: list[FileTask] = []
    for path in find_files(root, options.asset_match):
        rel = relative_key(path, root)
        tasks.append(FileTask(local_path=path, relative_key=rel, key=f"{options.deploy_path}{rel}"))
    return tasks
