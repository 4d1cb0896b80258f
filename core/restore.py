"""Reading and writing dependency file snapshots."""

import hashlib
import logging
from pathlib import Path

from .errors import RestoreError
from .models import DependencyFile

logger = logging.getLogger(__name__)


def git_blob_sha(content: bytes) -> str:
    """Return the SHA-1 git assigns to a blob with this content."""
    header = f"blob {len(content)}\0".encode()
    return hashlib.sha1(header + content).hexdigest()


def read_dep_file(path: str, root: str | Path = ".") -> DependencyFile:
    """Snapshot a file from disk.

    Args:
        path: File path, relative to root unless absolute
        root: Working directory the paths are relative to

    Returns:
        DependencyFile with content and git blob SHA

    Raises:
        RestoreError: If the file cannot be read
    """
    if not path:
        raise RestoreError("Dependency file path is empty")
    try:
        content = (Path(root) / path).read_bytes()
    except OSError as e:
        raise RestoreError(f"Cannot read {path}: {e}") from e
    return DependencyFile(path=path, sha=git_blob_sha(content), content=content)


def restore_dep_files(files: list[DependencyFile], root: str | Path = ".") -> None:
    """Write each file's content to its path, overwriting existing files.

    Stops at the first failure; files written before it are left in place.
    Parent directories are not created.

    Args:
        files: Snapshots to write
        root: Working directory the paths are relative to

    Raises:
        RestoreError: On an empty path or a failed write
    """
    for dep_file in files:
        if not dep_file.path:
            raise RestoreError("Dependency file path is empty")
        target = Path(root) / dep_file.path
        try:
            target.write_bytes(dep_file.content)
        except OSError as e:
            raise RestoreError(f"Cannot write {dep_file.path}: {e}") from e
        logger.debug("Restored %s (%d bytes)", dep_file.path, len(dep_file.content))
