"""Windows "Root" certificate store backend."""

import logging
from typing import Optional

from root_trust.base import PathLike, Trust
from root_trust.exceptions import CommandError, PathError, StoreWriteError
from root_trust.executor import quote_arg
from root_trust.models import CommandResult, Operation

logger = logging.getLogger(__name__)

ROOT_STORE = "Root"
UNTRUSTED_MARKER = "UNTRUSTED root"


def convert_path_to_cer(cert_path: str) -> str:
    """
    Replace the file extension with .cer, the extension certutil expects.

    Raises:
        PathError: The file name has no extension to replace
    """
    dot = cert_path.rfind(".")
    separator = max(cert_path.rfind("\\"), cert_path.rfind("/"))
    if dot <= separator:
        raise PathError(f"Certificate path has no file extension: {cert_path}")
    return cert_path[:dot] + ".cer"


def parse_serial_number(dump_line: str) -> str:
    """Take the serial out of certutil's 'Serial Number: 0a 1b ...' line."""
    parts = dump_line.split()
    if len(parts) < 3:
        raise StoreWriteError(
            "Could not read serial number from certutil output",
            store="Windows",
            error=dump_line.strip(),
        )
    return parts[2].strip()


class WindowsTrust(Trust):
    """Adds root certificates to the machine "Root" store with certutil."""

    name = "Windows"
    store = ROOT_STORE

    def _quote(self, value: str) -> str:
        return quote_arg(value, windows=True)

    async def install(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        self.require_certificate(cert_path)

        cer_path = convert_path_to_cer(str(cert_path))
        copied = cer_path != str(cert_path)
        if copied:
            try:
                self.fs.copy(cert_path, cer_path)
            except OSError as e:
                raise StoreWriteError(
                    f"Could not copy certificate to {cer_path}", store=self.name, error=str(e)
                ) from e

        try:
            result = await self.run_elevated(
                f"certutil -addstore {self._quote(self.store)} {self._quote(cer_path)}"
            )
        finally:
            if copied:
                self._discard(cer_path)

        return self.handle_install_result(result, Operation.ADD)

    def _discard(self, path: str) -> None:
        try:
            self.fs.remove(path)
        except OSError as e:
            logger.debug(f"Could not remove temporary {path}: {e}")

    async def uninstall(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        dump = await self._dump_serial(str(cert_path))

        if dump.stdout.strip():
            serial_number = parse_serial_number(dump.stdout.strip().splitlines()[0])
            logger.debug(f"Serial number of {cert_path}: {serial_number}")
            result = await self.run_elevated(
                f"certutil -delstore {self._quote(self.store)} {self._quote(serial_number)}"
            )
            return self.handle_install_result(result, Operation.REMOVE)

        return self.handle_install_result(dump, Operation.REMOVE)

    async def _dump_serial(self, cert_path: str) -> CommandResult:
        try:
            return await self.executor.run(f'certutil.exe -dump {self._quote(cert_path)} | find "Serial"')
        except CommandError as e:
            return e.result

    async def exists(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        try:
            result = await self.executor.run(f"certutil.exe -verify {self._quote(str(cert_path))}")
        except Exception as e:
            logger.debug(f"certutil -verify failed: {e}")
            return False

        if result.stdout:
            return UNTRUSTED_MARKER not in result.stdout
        if result.stderr:
            return False
        return True
