"""Exception hierarchy for autoupdate.

Every error raised by the core derives from AutoUpdateError so the CLI and
the web app can map them to exit codes and HTTP statuses in one place.
"""


class AutoUpdateError(Exception):
    """Base error for autoupdate."""

    code: str = "UNKNOWN"


class ConfigError(AutoUpdateError):
    """Configuration file missing or invalid."""

    code = "CONFIG_ERROR"


class FeedError(AutoUpdateError):
    """Update set could not be retrieved from the feed service."""

    code = "FEED_ERROR"


class FeedTransportError(FeedError):
    """Network failure or error status from the feed service."""

    code = "FEED_TRANSPORT_ERROR"


class FeedDecodeError(FeedError):
    """Feed response is not a valid update set document."""

    code = "FEED_DECODE_ERROR"


class UnknownEcosystemError(AutoUpdateError):
    """No plugin is registered for an ecosystem."""

    code = "UNKNOWN_ECOSYSTEM"

    def __init__(self, ecosystem: str):
        super().__init__(f"Unknown ecosystem: {ecosystem}")
        self.ecosystem = ecosystem


class DuplicateEcosystemError(AutoUpdateError):
    """A plugin is already registered under that ecosystem name."""

    code = "DUPLICATE_ECOSYSTEM"


class UnsupportedUpdateError(AutoUpdateError):
    """A plugin declined a kind of update it does not handle."""

    code = "UNSUPPORTED_UPDATE"


class PairingError(AutoUpdateError):
    """A plugin returned an original/updated pair for different paths."""

    code = "PAIRING_ERROR"


class PatchError(AutoUpdateError):
    """A patch does not apply cleanly."""

    code = "PATCH_ERROR"


class RestoreError(AutoUpdateError):
    """A dependency file could not be read or written."""

    code = "RESTORE_ERROR"
