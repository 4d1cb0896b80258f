"""Pytest configuration and fixtures."""

import pytest

from core.models import DependencyFile, FilePair, RequirementUpdate, VersionUpdate
from core.registry import Plugin, Registry

GEMFILE_SHA = "dc6bdc865c85a4f5c6ef0f4ba8909d8652fd8cd0"

GEMFILE_PATCH = (
    "--- Gemfile\n+++ Gemfile\n"
    "@@ -5 +5 @@\n-gem \"warden\", \"0.10.3\"\n+gem \"warden\", '~> 1.2.3'\n"
    "@@ -4 +4 @@\n-gem \"rails\", \"3.0.0.beta3\"\n+gem \"rails\", '~> 4.0.3'\n"
    "@@ -7 +7 @@\n-gem \"webrat\", \"0.7\"\n+gem \"webrat\", '~> 0.7.3'\n"
)

GEMFILE = (
    "source 'https://rubygems.org'\n"
    "\n"
    "gem \"rake\"\n"
    "gem \"rails\", \"3.0.0.beta3\"\n"
    "gem \"warden\", \"0.10.3\"\n"
    "gem \"haml\"\n"
    "gem \"webrat\", \"0.7\"\n"
)


class FakePlugin(Plugin):
    """Plugin returning canned snapshots without touching the disk."""

    name = "fakePackage"

    def apply_requirements(self, updates: list[RequirementUpdate], working) -> list[FilePair]:
        pairs = []
        for update in updates:
            original = DependencyFile(path=update.file.path, sha=update.file.sha, content=b"original content")
            updated = DependencyFile(path=update.file.path, sha=update.file.sha, content=b"New content")
            pairs.append(FilePair(original=original, updated=updated))
        return pairs

    def apply_versions(self, updates: list[VersionUpdate], working) -> list[FilePair]:
        original = DependencyFile(
            path="Gemfile.lock", sha="09c2f8647e14e49e922b955c194102070597c2d1", content=b"original content"
        )
        updated = DependencyFile(
            path="Gemfile.lock", sha="141162477fd3bf27aed3bbea4fe3d17c71d6c7be", content=b"updated content"
        )
        return [FilePair(original=original, updated=updated)]


@pytest.fixture
def gemfile_patch():
    return GEMFILE_PATCH


@pytest.fixture
def update_set_json():
    """Update set document as served by the feed."""
    return {
        "id": 1,
        "requirement_updates": {
            "Rubygem": [
                {"file": {"path": "Gemfile", "sha": GEMFILE_SHA}, "patch": GEMFILE_PATCH},
            ]
        },
        "version_updates": {},
    }


@pytest.fixture
def project_dir(tmp_path):
    """Project checkout holding a Gemfile and a requirements.txt."""
    (tmp_path / "Gemfile").write_text(GEMFILE)
    (tmp_path / "requirements.txt").write_text(
        "# Web framework\nfastapi==0.85.0  # pinned\nuvicorn>=0.18.0\nrequests[socks]==2.28.0\n"
    )
    return tmp_path


@pytest.fixture
def gemfile_text():
    return GEMFILE


@pytest.fixture
def fake_registry():
    """Fresh registry with the fake plugin under 'fakePackage'."""
    registry = Registry()
    registry.register(FakePlugin())
    return registry
