"""Built-in ecosystem plugins."""

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from packaging.utils import canonicalize_name

from .errors import RestoreError
from .models import DependencyFile, FilePair, RequirementUpdate, VersionUpdate
from .parse_python import parse_requirements, requirement_part
from .patch import apply_patch
from .registry import Plugin, Registry
from .restore import git_blob_sha, read_dep_file

logger = logging.getLogger(__name__)


def decode_text(dep_file: DependencyFile) -> str:
    """Return a manifest's content as text.

    Raises:
        RestoreError: If the content is not UTF-8
    """
    try:
        return dep_file.text
    except UnicodeDecodeError as e:
        raise RestoreError(f"{dep_file.path} is not UTF-8: {e}") from e


def snapshot(content: str, path: str) -> DependencyFile:
    data = content.encode("utf-8")
    return DependencyFile(path=path, sha=git_blob_sha(data), content=data)


class TextManifestPlugin(Plugin):
    """Applies requirement patches to plain-text manifests found under root."""

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    def current(self, path: str, working: Mapping[str, DependencyFile]) -> DependencyFile:
        """Latest snapshot of a file: earlier in-flight changes win over disk."""
        if path in working:
            return working[path]
        return read_dep_file(path, self.root)

    def apply_requirements(
        self, updates: list[RequirementUpdate], working: Mapping[str, DependencyFile]
    ) -> list[FilePair]:
        local = dict(working)
        pairs = []

        for update in updates:
            path = update.file.path
            original = self.current(path, local)
            if path not in local and update.file.sha and update.file.sha != original.sha:
                logger.warning(
                    "%s has changed since the update set was computed (expected %s, found %s)",
                    path, update.file.sha, original.sha,
                )

            logger.info("Patching %s", path)
            updated = snapshot(apply_patch(decode_text(original), update.patch), path)

            local[path] = updated
            pairs.append(FilePair(original=original, updated=updated))

        return pairs


class RubygemPlugin(TextManifestPlugin):
    """Gemfile patches. Lockfile regeneration is left to bundler."""

    name = "Rubygem"


class PypiPlugin(TextManifestPlugin):
    """requirements.txt patches and exact-pin version bumps."""

    name = "PypiPackage"

    def __init__(self, root: str | Path = ".", requirement_files: list[str] | None = None):
        super().__init__(root)
        self.requirement_files = requirement_files or ["requirements.txt"]

    def apply_versions(
        self, updates: list[VersionUpdate], working: Mapping[str, DependencyFile]
    ) -> list[FilePair]:
        targets = {canonicalize_name(u.package.name): u for u in updates}
        pairs = []

        for path in self.requirement_files:
            if path not in working and not (self.root / path).is_file():
                logger.debug("Skipping missing requirements file %s", path)
                continue

            original = self.current(path, working)
            text = decode_text(original)
            bumped = bump_pins(text, targets)
            if bumped == text:
                continue

            logger.info("Pinned new versions in %s", path)
            pairs.append(FilePair(original=original, updated=snapshot(bumped, path)))

        return pairs


def bump_pins(content: str, targets: dict[str, VersionUpdate]) -> str:
    """Rewrite exact pins to their target versions.

    Args:
        content: requirements.txt content
        targets: Version updates keyed by canonical package name

    Returns:
        Updated content; lines pinned to a version other than the update's
        old version are left alone
    """
    manifest = parse_requirements(content)
    lines = content.splitlines(keepends=True)

    for entry in manifest.entries:
        update = targets.get(canonicalize_name(entry.name))
        pinned = manifest.pinned_version(entry)
        if update is None or pinned is None:
            continue
        if update.old_version and pinned != update.old_version:
            continue

        line = lines[entry.line_no]
        requirement = requirement_part(line)
        bumped = re.sub(
            r"==\s*" + re.escape(pinned) + r"(?![\w.])",
            "==" + update.target_version,
            requirement,
            count=1,
        )
        lines[entry.line_no] = bumped + line[len(requirement):]

    return "".join(lines)


def default_registry(root: str | Path = ".", requirement_files: list[str] | None = None) -> Registry:
    """Build a registry holding the built-in plugins."""
    registry = Registry()
    registry.register(RubygemPlugin(root))
    registry.register(PypiPlugin(root, requirement_files))
    return registry
