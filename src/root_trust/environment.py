"""Host environment and configuration."""

import os
import platform
import sys
from dataclasses import dataclass, field
from typing import Mapping, Optional

CERTUTIL_ENV = "ROOT_TRUST_CERTUTIL"
NSS_PROFILE_DIR_ENV = "ROOT_TRUST_NSS_PROFILE_DIR"
APP_NAME_ENV = "ROOT_TRUST_APP_NAME"

# platform.machine() spellings -> normalised architecture
_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "ia32",
    "i486": "ia32",
    "i586": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "ia32": "ia32",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def normalize_platform(value: str) -> str:
    """Map sys.platform style values to darwin/win32/linux."""
    value = value.lower()
    if value.startswith("linux"):
        return "linux"
    if value in ("win32", "cygwin", "windows"):
        return "win32"
    if value in ("darwin", "macos"):
        return "darwin"
    return value


def normalize_arch(machine: str) -> str:
    return _ARCH_ALIASES.get(machine.lower(), machine.lower())


@dataclass(frozen=True)
class HostEnvironment:
    """
    Everything the backends read from the running host.

    Passing an explicit instance lets tests fabricate a macOS or Windows host
    on any machine.
    """

    platform: str
    arch: str
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_host(cls, environ: Optional[Mapping[str, str]] = None) -> "HostEnvironment":
        return cls(
            platform=normalize_platform(sys.platform),
            arch=normalize_arch(platform.machine()),
            environ=dict(os.environ if environ is None else environ),
        )

    def get(self, key: str, default: str = "") -> str:
        return self.environ.get(key, default)

    @property
    def home(self) -> str:
        return self.get("HOME")

    @property
    def user_profile(self) -> str:
        return self.get("USERPROFILE")

    @property
    def is_windows(self) -> bool:
        return self.platform == "win32"
