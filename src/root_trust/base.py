"""Shared contract of all trust backends."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from root_trust.environment import HostEnvironment
from root_trust.exceptions import CertNotFound, StoreWriteError
from root_trust.executor import CommandExecutor, ElevatedExecutor
from root_trust.filesystem import Filesystem, default_filesystem
from root_trust.models import CommandResult, Operation

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Trust(ABC):
    """
    A trust store that root certificates can be added to and removed from.

    Subclasses resolve their store configuration once in ``__init__`` and
    implement the three async operations. ``install`` and ``uninstall`` raise
    on failure; ``exists`` never raises.
    """

    name: str = ""

    def __init__(
        self,
        env: Optional[HostEnvironment] = None,
        fs: Optional[Filesystem] = None,
        executor: Optional[CommandExecutor] = None,
        elevated: Optional[ElevatedExecutor] = None,
        app_name: Optional[str] = None,
    ):
        self.env = env or HostEnvironment.from_host()
        self.fs = fs or default_filesystem
        self.executor = executor or CommandExecutor()
        self.elevated = elevated or ElevatedExecutor(self.env, label=app_name)
        self.app_name = app_name

    @abstractmethod
    async def install(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        """Add the certificate to the store."""

    @abstractmethod
    async def uninstall(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        """Remove the certificate from the store."""

    @abstractmethod
    async def exists(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        """Whether the certificate is trusted; False on any failure."""

    def require_certificate(self, cert_path: PathLike) -> None:
        if not self.fs.is_file(cert_path):
            raise CertNotFound(f"Certificate not found: {cert_path}")

    async def run_elevated(self, command: str) -> CommandResult:
        return await self.elevated.run(command, self.app_name)

    def handle_install_result(self, result: CommandResult, operation: Operation) -> bool:
        """Map a store-mutation command result to success or StoreWriteError."""
        error = result.stderr.strip()
        if not error and result.returncode != 0:
            error = result.stdout.strip() or f"exit status {result.returncode}"
        if error:
            raise StoreWriteError(
                f"Could not {operation.verb} {self.name} store",
                store=self.name,
                error=error,
            )
        logger.info(f"Certificate successfully {operation.past} {self.name}!")
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.env.platform}/{self.env.arch}>"
