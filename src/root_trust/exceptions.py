"""Exceptions raised by trust store operations."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from root_trust.models import CommandResult


class TrustError(Exception):
    """Base class for all trust store errors."""


class UnsupportedPlatform(TrustError):
    """No backend is available for the requested target."""


class CertNotFound(TrustError):
    """The certificate file does not exist or cannot be read."""


class IdentityExtractionError(TrustError):
    """The certificate file could not be parsed or has no common name."""


class PathError(TrustError):
    """A store path could not be derived from the certificate path."""


class ProfileDiscoveryError(TrustError):
    """No NSS profile databases were found."""


class StoreWriteError(TrustError):
    """The command mutating a trust store reported a failure."""

    def __init__(self, message: str, store: str = "", error: str = ""):
        super().__init__(message)
        self.store = store
        self.error = error

    def __str__(self) -> str:
        if self.error:
            return f"{self.args[0]}: {self.error}"
        return self.args[0]


class CommandError(TrustError):
    """An unprivileged command exited with a non-zero status."""

    def __init__(self, result: "CommandResult", message: Optional[str] = None):
        super().__init__(message or f"Command failed with exit status {result.returncode}: {result.command}")
        self.result = result
