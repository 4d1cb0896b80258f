"""Formatting of before/after file states."""

import difflib
import json
from fnmatch import fnmatch

from .models import DependencyFile


def filter_ignored(
    orig_files: list[DependencyFile],
    upt_files: list[DependencyFile],
    ignored_paths: list[str],
) -> tuple[list[DependencyFile], list[DependencyFile]]:
    """Drop pairs whose path matches one of the ignored glob patterns."""
    kept = [
        (orig, upt)
        for orig, upt in zip(orig_files, upt_files)
        if not any(fnmatch(orig.path, pattern) for pattern in ignored_paths)
    ]
    return [orig for orig, _ in kept], [upt for _, upt in kept]


def changed_pairs(
    orig_files: list[DependencyFile], upt_files: list[DependencyFile]
) -> list[tuple[DependencyFile, DependencyFile]]:
    return [(orig, upt) for orig, upt in zip(orig_files, upt_files) if orig.content != upt.content]


def format_diff(original: DependencyFile, updated: DependencyFile) -> str:
    """Unified diff between two snapshots of the same file."""
    lines = difflib.unified_diff(
        original.content.decode("utf-8", errors="replace").splitlines(keepends=True),
        updated.content.decode("utf-8", errors="replace").splitlines(keepends=True),
        fromfile=original.path,
        tofile=updated.path,
    )
    return "".join(lines)


def format_json_output(
    update_set_id: int, orig_files: list[DependencyFile], upt_files: list[DependencyFile]
) -> str:
    """Format JSON output."""
    files = []
    for orig, upt in zip(orig_files, upt_files):
        files.append({
            "path": orig.path,
            "original_sha": orig.sha,
            "updated_sha": upt.sha,
            "changed": orig.content != upt.content,
        })

    return json.dumps({"id": update_set_id, "files": files}, indent=2)
