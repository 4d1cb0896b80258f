"""Application of update sets through the ecosystem plugins."""

import logging
from types import MappingProxyType

from .errors import PairingError
from .models import DependencyFile, FilePair, UpdateSet
from .registry import Registry

logger = logging.getLogger(__name__)


def apply_update_set(
    update_set: UpdateSet, registry: Registry
) -> tuple[list[DependencyFile], list[DependencyFile]]:
    """Apply every requirement and version update of a set.

    Requirement updates are dispatched first, then version updates. The
    returned lists have the same length and the same path at each index.
    Nothing is written to disk.

    Args:
        update_set: Decoded update set
        registry: Plugins by ecosystem name

    Returns:
        Tuple of (original files, updated files)

    Raises:
        UnknownEcosystemError: If an ecosystem has no registered plugin
        PairingError: If a plugin returns a pair for two different paths
        AutoUpdateError: Any plugin error, propagated unchanged
    """
    pairs: list[FilePair] = []
    working: dict[str, DependencyFile] = {}
    # read-only live view; plugins see each earlier call's results
    view = MappingProxyType(working)

    for ecosystem, updates in update_set.requirement_updates.items():
        plugin = registry.get(ecosystem)
        logger.debug("Applying %d requirement updates for %s", len(updates), ecosystem)
        pairs.extend(_checked(plugin.apply_requirements(updates, view), ecosystem, working))

    for ecosystem, updates in update_set.version_updates.items():
        plugin = registry.get(ecosystem)
        logger.debug("Applying %d version updates for %s", len(updates), ecosystem)
        pairs.extend(_checked(plugin.apply_versions(updates, view), ecosystem, working))

    logger.info("Update set %s touched %d files", update_set.id, len(pairs))
    return [pair.original for pair in pairs], [pair.updated for pair in pairs]


def _checked(
    pairs: list[FilePair], ecosystem: str, working: dict[str, DependencyFile]
) -> list[FilePair]:
    for pair in pairs:
        if pair.original.path != pair.updated.path:
            raise PairingError(
                f"{ecosystem} paired {pair.original.path!r} with {pair.updated.path!r}"
            )
        working[pair.updated.path] = pair.updated
    return pairs
