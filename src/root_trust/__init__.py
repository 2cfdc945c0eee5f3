"""Install, remove and check root certificates in host trust stores."""

from root_trust.base import Trust
from root_trust.environment import HostEnvironment
from root_trust.exceptions import (
    CertNotFound,
    CommandError,
    IdentityExtractionError,
    PathError,
    ProfileDiscoveryError,
    StoreWriteError,
    TrustError,
    UnsupportedPlatform,
)
from root_trust.linux import LinuxTrust
from root_trust.macos import MacOsTrust
from root_trust.nss import NssTrust
from root_trust.resolver import SUPPORTED_TARGETS, generate_trust, resolve_backend
from root_trust.windows import WindowsTrust

__version__ = "0.1.0"

__all__ = [
    "CertNotFound",
    "CommandError",
    "HostEnvironment",
    "IdentityExtractionError",
    "LinuxTrust",
    "MacOsTrust",
    "NssTrust",
    "PathError",
    "ProfileDiscoveryError",
    "SUPPORTED_TARGETS",
    "StoreWriteError",
    "Trust",
    "TrustError",
    "UnsupportedPlatform",
    "WindowsTrust",
    "generate_trust",
    "resolve_backend",
]
