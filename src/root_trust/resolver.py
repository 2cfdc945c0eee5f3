"""Select the trust backend for a target."""

import logging
from typing import Dict, Optional, Type

from root_trust.base import Trust
from root_trust.environment import HostEnvironment, normalize_platform
from root_trust.exceptions import UnsupportedPlatform
from root_trust.linux import LinuxTrust
from root_trust.macos import MacOsTrust
from root_trust.nss import NssTrust
from root_trust.windows import WindowsTrust

logger = logging.getLogger(__name__)

BACKENDS: Dict[str, Type[Trust]] = {
    "darwin": MacOsTrust,
    "win32": WindowsTrust,
    "linux": LinuxTrust,
    "nss": NssTrust,
}

SUPPORTED_TARGETS = tuple(BACKENDS)


def resolve_backend(
    target: Optional[str] = None,
    app_name: Optional[str] = None,
    env: Optional[HostEnvironment] = None,
    **kwargs,
) -> Trust:
    """
    Build the trust backend for a target.

    Args:
        target: darwin, win32, linux or nss; defaults to the host platform
        app_name: Label shown in elevation prompts
        env: Host environment, read from the running process when omitted
        **kwargs: Passed to the backend (fs, executor, elevated, ...)

    Raises:
        UnsupportedPlatform: Unknown target, or NSS unavailable on this host
    """
    env = env or HostEnvironment.from_host()
    key = normalize_platform(env.platform) if target is None else target

    backend_class = BACKENDS.get(key)
    if backend_class is None:
        raise UnsupportedPlatform(
            f"Unsupported target '{key}'. Only MacOs, Linux, Windows and NSS are supported"
        )

    logger.debug(f"Using {backend_class.__name__} for target '{key}'")
    return backend_class(env=env, app_name=app_name, **kwargs)


generate_trust = resolve_backend
