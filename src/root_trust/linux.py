"""Linux system anchor directory backend."""

import logging
from pathlib import PurePosixPath
from typing import Callable, Optional, Sequence, Tuple

from root_trust.base import PathLike, Trust
from root_trust.exceptions import PathError, StoreWriteError
from root_trust.executor import quote_arg, which
from root_trust.models import LinuxStoreConfig, Operation

logger = logging.getLogger(__name__)

# Probed in order; the first existing directory wins.
# (anchor directory, file name template, trust refresh command)
ANCHOR_LAYOUTS: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    ("/etc/pki/ca-trust/source/anchors/", "/etc/pki/ca-trust/source/anchors/%s.pem", ("update-ca-trust", "extract")),
    ("/usr/local/share/ca-certificates/", "/usr/local/share/ca-certificates/%s.crt", ("update-ca-certificates",)),
    ("/etc/ca-certificates/trust-source/anchors/", "/etc/ca-certificates/trust-source/anchors/%s.crt", ("trust", "extract-compat")),
)


def detect_store_config(
    is_dir: Callable[[str], bool],
    resolve_command: Callable[[str], Optional[str]] = which,
    layouts: Sequence[Tuple[str, str, Tuple[str, ...]]] = ANCHOR_LAYOUTS,
) -> LinuxStoreConfig:
    """
    Find the anchor layout of this distribution.

    The refresh command is dropped when it is not on the search path; the
    anchor file is then still written but the compiled bundle is not rebuilt.
    """
    for directory, template, commands in layouts:
        if not is_dir(directory):
            continue

        if not resolve_command(commands[0]):
            logger.warning(f"Trust refresh command '{commands[0]}' not found; anchors in {directory} will not be activated")
            return LinuxStoreConfig(filename_template=template)

        logger.debug(f"Using anchor directory {directory} with '{' '.join(commands)}'")
        return LinuxStoreConfig(filename_template=template, update_commands=commands)

    logger.warning("No known system anchor directory found on this host")
    return LinuxStoreConfig()


class LinuxTrust(Trust):
    """Drops root certificates into the distribution's anchor directory."""

    name = "Linux"

    def __init__(self, *args, resolve_command: Callable[[str], Optional[str]] = which, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = detect_store_config(self.fs.is_dir, resolve_command)

    @property
    def system_trust_filename(self) -> str:
        return self.config.filename_template

    @property
    def system_trust_commands(self) -> Tuple[str, ...]:
        return self.config.update_commands

    def anchor_path(self, cert_path: PathLike) -> str:
        """Destination of a certificate inside the anchor directory."""
        if not self.config.found:
            raise PathError("No system anchor directory available on this host")
        stem = PurePosixPath(str(cert_path)).stem
        return self.config.filename_template.replace("%s", stem)

    def _store_path(self, cert_path: PathLike) -> str:
        try:
            return self.anchor_path(cert_path)
        except PathError as e:
            raise StoreWriteError(f"Could not locate {self.name} store", store=self.name, error=str(e)) from e

    async def install(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        self.require_certificate(cert_path)
        destination = self._store_path(cert_path)

        try:
            self.fs.copy(cert_path, destination)
        except PermissionError:
            # Anchor directories are root-owned
            logger.debug(f"No write access to {destination}, copying with elevation")
            result = await self.run_elevated(f"cp {quote_arg(str(cert_path))} {quote_arg(destination)}")
            if not result.ok:
                return self.handle_install_result(result, Operation.ADD)
        except OSError as e:
            raise StoreWriteError(
                f"Could not copy certificate to {destination}", store=self.name, error=str(e)
            ) from e

        return await self._refresh(Operation.ADD)

    async def uninstall(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        destination = self._store_path(cert_path)

        result = await self.run_elevated(f"rm -f {quote_arg(destination)}")
        if not result.ok:
            return self.handle_install_result(result, Operation.REMOVE)
        return await self._refresh(Operation.REMOVE)

    async def _refresh(self, operation: Operation) -> bool:
        if not self.system_trust_commands:
            logger.warning(f"No trust refresh command; certificate {operation.past} anchor directory only")
            logger.info(f"Certificate successfully {operation.past} {self.name}!")
            return True

        result = await self.run_elevated(" ".join(self.system_trust_commands))
        return self.handle_install_result(result, operation)

    async def exists(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        try:
            return self.fs.is_file(self.anchor_path(cert_path))
        except Exception as e:
            logger.debug(f"Could not check anchor file: {e}")
            return False
