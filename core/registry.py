"""Ecosystem plugins and the registry that maps ecosystem names to them."""

from collections.abc import Mapping

from .errors import DuplicateEcosystemError, UnknownEcosystemError, UnsupportedUpdateError
from .models import DependencyFile, FilePair, RequirementUpdate, VersionUpdate


class Plugin:
    """Applies updates for one package ecosystem.

    Subclasses must implement apply_requirements. apply_versions declines by
    default; override it when the ecosystem can resolve version updates.

    Both methods receive ``working``: the latest snapshot of every file
    already changed earlier in the same application, keyed by path. A plugin
    touching one of those paths must start from that snapshot, not from disk.
    """

    name: str = ""

    def apply_requirements(
        self, updates: list[RequirementUpdate], working: Mapping[str, DependencyFile]
    ) -> list[FilePair]:
        """Apply requirement patches.

        Args:
            updates: Requirement updates in the order received
            working: Files changed so far, by path

        Returns:
            One FilePair per update, in input order
        """
        raise NotImplementedError

    def apply_versions(
        self, updates: list[VersionUpdate], working: Mapping[str, DependencyFile]
    ) -> list[FilePair]:
        """Apply version updates.

        Args:
            updates: Version updates in the order received
            working: Files changed so far, by path

        Returns:
            Any number of FilePairs, one per touched file
        """
        raise UnsupportedUpdateError(f"{self.name or type(self).__name__} does not support version updates")


class Registry:
    """Mapping from ecosystem name to plugin.

    Registration is additive; there is no removal. Build one per process (or
    per test) and register every plugin before applying update sets.
    """

    def __init__(self):
        self._plugins: dict[str, Plugin] = {}

    def register(self, plugin: Plugin, name: str | None = None) -> None:
        """Register a plugin under its name, or under an explicit one.

        Raises:
            DuplicateEcosystemError: If the name is already taken
            ValueError: If no name is available
        """
        key = name or plugin.name
        if not key:
            raise ValueError("Plugin must have a name")
        if key in self._plugins:
            raise DuplicateEcosystemError(f"Ecosystem already registered: {key}")
        self._plugins[key] = plugin

    def get(self, name: str) -> Plugin:
        """Return the plugin for an ecosystem.

        Raises:
            UnknownEcosystemError: If nothing is registered under the name
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise UnknownEcosystemError(name) from None

    def names(self) -> list[str]:
        return sorted(self._plugins)

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)
