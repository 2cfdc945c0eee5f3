"""macOS system keychain backend."""

import logging
from typing import Optional

from root_trust.base import PathLike, Trust
from root_trust.certificate import extract_common_name
from root_trust.executor import quote_arg
from root_trust.models import Operation

logger = logging.getLogger(__name__)

SYSTEM_KEYCHAIN = "/Library/Keychains/System.keychain"


class MacOsTrust(Trust):
    """Adds root certificates to the system keychain with the `security` tool."""

    name = "MacOs"
    keychain = SYSTEM_KEYCHAIN

    async def install(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        self.require_certificate(cert_path)

        result = await self.run_elevated(
            f"security add-trusted-cert -d -r trustRoot -k {quote_arg(self.keychain)} {quote_arg(str(cert_path))}"
        )
        return self.handle_install_result(result, Operation.ADD)

    async def uninstall(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        common_name = extract_common_name(cert_path)

        result = await self.run_elevated(
            f"security delete-certificate -c {quote_arg(common_name)} {quote_arg(self.keychain)}"
        )
        return self.handle_install_result(result, Operation.REMOVE)

    async def exists(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        try:
            common_name = extract_common_name(cert_path)
            await self.executor.run(
                f"security find-certificate -c {quote_arg(common_name)} {quote_arg(self.keychain)}"
            )
            return True
        except Exception as e:
            logger.debug(f"Certificate not found in keychain: {e}")
            return False
