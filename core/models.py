"""Core data models for autoupdate."""

from dataclasses import dataclass, field

from .errors import FeedDecodeError


@dataclass(frozen=True)
class DependencyFile:
    """Snapshot of a dependency manifest or lockfile."""

    path: str
    sha: str = ""
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    @classmethod
    def from_dict(cls, data: dict) -> "DependencyFile":
        return cls(
            path=_require(data, "path", str),
            sha=_optional(data, "sha", str, ""),
        )


@dataclass(frozen=True)
class Package:
    """A dependency as known by the feed service."""

    name: str
    slug: str
    type: str  # ecosystem, e.g. Rubygem

    @classmethod
    def from_dict(cls, data: dict) -> "Package":
        return cls(
            name=_require(data, "name", str),
            slug=_optional(data, "slug", str, ""),
            type=_optional(data, "type", str, ""),
        )


@dataclass(frozen=True)
class RequirementUpdate:
    """A patch to apply to one manifest file."""

    file: DependencyFile
    patch: str

    @classmethod
    def from_dict(cls, data: dict) -> "RequirementUpdate":
        return cls(
            file=DependencyFile.from_dict(_require(data, "file", dict)),
            patch=_require(data, "patch", str),
        )


@dataclass(frozen=True)
class VersionUpdate:
    """A resolved version change for one package."""

    package: Package
    old_version: str
    target_version: str

    @classmethod
    def from_dict(cls, data: dict) -> "VersionUpdate":
        return cls(
            package=Package.from_dict(_require(data, "package", dict)),
            old_version=_optional(data, "old_version", str, ""),
            target_version=_require(data, "target_version", str),
        )


@dataclass(frozen=True)
class FilePair:
    """Original and updated snapshots of the same file."""

    original: DependencyFile
    updated: DependencyFile


@dataclass
class UpdateSet:
    """A batch of proposed dependency changes, grouped by ecosystem."""

    id: int
    requirement_updates: dict[str, list[RequirementUpdate]] = field(default_factory=dict)
    version_updates: dict[str, list[VersionUpdate]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "UpdateSet":
        """Decode an update set from the feed's JSON document.

        Args:
            data: Decoded JSON object

        Returns:
            The update set

        Raises:
            FeedDecodeError: If the document does not have the expected shape
        """
        if not isinstance(data, dict):
            raise FeedDecodeError("Update set must be a JSON object")

        set_id = data.get("id")
        if not isinstance(set_id, int) or isinstance(set_id, bool):
            raise FeedDecodeError("Update set 'id' must be an integer")

        return cls(
            id=set_id,
            requirement_updates=_decode_groups(data, "requirement_updates", RequirementUpdate),
            version_updates=_decode_groups(data, "version_updates", VersionUpdate),
        )

    def ecosystems(self) -> list[str]:
        """Return every ecosystem referenced by the set, without duplicates."""
        names = list(self.requirement_updates)
        names.extend(name for name in self.version_updates if name not in names)
        return names


@dataclass
class ManifestEntry:
    """A pinned or constrained requirement found on one manifest line."""

    name: str
    line_no: int  # 0-based
    spec: str | None = None
    markers: str | None = None
    extras: list[str] | None = None


@dataclass
class Manifest:
    """A parsed requirements manifest."""

    raw: str
    entries: list[ManifestEntry]

    def pinned_version(self, entry: ManifestEntry) -> str | None:
        """Return the exact version an entry pins, if any."""
        if entry.spec and entry.spec.startswith("==") and not entry.spec.startswith("===") and "," not in entry.spec:
            return entry.spec[2:].strip()
        return None


def _decode_groups(data: dict, key: str, item_cls) -> dict:
    groups = data.get(key)
    if groups is None:
        return {}
    if not isinstance(groups, dict):
        raise FeedDecodeError(f"'{key}' must be an object keyed by ecosystem")

    decoded = {}
    for ecosystem, items in groups.items():
        if not isinstance(items, list):
            raise FeedDecodeError(f"'{key}.{ecosystem}' must be a list")
        decoded[ecosystem] = [item_cls.from_dict(_as_object(item, key)) for item in items]
    return decoded


def _as_object(value, context: str) -> dict:
    if not isinstance(value, dict):
        raise FeedDecodeError(f"Entries of '{context}' must be objects")
    return value


def _require(data: dict, key: str, kind: type):
    value = data.get(key)
    if not isinstance(value, kind):
        raise FeedDecodeError(f"Missing or invalid field '{key}'")
    return value


def _optional(data: dict, key: str, kind: type, default):
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise FeedDecodeError(f"Invalid field '{key}'")
    return value
