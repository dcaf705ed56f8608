"""parinstall exception hierarchy.

All public exceptions inherit from ParInstallError, giving callers a single
base class to catch when they want to handle any parinstall-specific failure
without swallowing unrelated errors.
"""


class ParInstallError(Exception):
    """Base exception for all parinstall errors."""


class ConfigurationError(ParInstallError):
    """Raised when a run is misconfigured.

    Covers invalid worker counts, a missing manifest, and an unusable
    cache directory. Always raised before any resolution or scheduling
    begins.
    """


class ManifestError(ConfigurationError):
    """Raised when the cpanfile cannot be read or parsed."""


class ResolutionLookupError(ParInstallError):
    """Raised when a registry lookup for a package fails.

    Covers unknown packages, HTTP errors, timeouts, and malformed
    registry payloads. The resolver recovers from it by omitting the
    package and its subtree from the graph.
    """

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class InstallError(ParInstallError):
    """Raised by an installer when a package fails to install."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class LockfileError(ParInstallError):
    """Raised when a lockfile cannot be read or is corrupt."""
