"""Filesystem helpers used by the scaffold workflow."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from repo_scaffold.scaffold.errors import PartialCleanupError

logger = logging.getLogger(__name__)

MAX_CLEANUP_WORKERS = 4


def path_exists(path: Path) -> bool:
    # Dangling symlinks count as existing.
    return path.exists() or path.is_symlink()


def remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree. Missing paths are ignored."""

    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
        return
    if path.is_dir():
        shutil.rmtree(path)


def remove_excluded(target: Path, excludes: Iterable[str]) -> list[Path]:
    """Remove `excludes` (relative to `target`) concurrently.

    Every removal is joined before returning. Failures are collected and
    raised together as a `PartialCleanupError`; paths removed successfully
    stay removed.
    """

    root = target.resolve()
    paths: list[Path] = []
    for name in excludes:
        # Resolve the parent only; an excluded symlink is removed, not its target.
        normalized = Path(os.path.normpath(root / name))
        candidate = normalized.parent.resolve() / normalized.name
        if candidate == root or root not in candidate.parents:
            raise ValueError(f"Excluded path escapes the target directory: {name}")
        if candidate not in paths:
            paths.append(candidate)

    if not paths:
        return []

    failures: dict[Path, BaseException] = {}
    workers = min(MAX_CLEANUP_WORKERS, len(paths))
    with ThreadPoolExecutor(max_workers=workers) as exe:
        futures = {path: exe.submit(remove_path, path) for path in paths}
        for path, fut in futures.items():
            exc = fut.exception()
            if exc is not None:
                failures[path] = exc

    if failures:
        raise PartialCleanupError(failures)

    logger.debug("Removed excluded paths", extra={"paths": [str(p) for p in paths]})
    return paths


def copy_template(source: Path, target: Path, excludes: Iterable[str] = ()) -> None:
    """Copy the whole `source` tree into `target`, then strip `excludes`."""

    if not source.is_dir():
        raise FileNotFoundError(f"Template directory not found: {source}")

    shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
    logger.info("Template copied", extra={"source": str(source), "target": str(target)})
    remove_excluded(target, excludes)
