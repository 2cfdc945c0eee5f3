"""NSS certificate database backend (Firefox profiles)."""

import logging
import ntpath
import posixpath
from pathlib import Path
from typing import Callable, List, Optional

from root_trust.base import PathLike, Trust
from root_trust.certificate import extract_common_name
from root_trust.environment import CERTUTIL_ENV, NSS_PROFILE_DIR_ENV, HostEnvironment
from root_trust.exceptions import ProfileDiscoveryError, UnsupportedPlatform
from root_trust.executor import quote_arg, which
from root_trust.models import DatabaseKind, NssDatabase, Operation

logger = logging.getLogger(__name__)

# Bundled NSS tools: root_trust/bin/<dir>/certutil
BUNDLED_NSS_DIR = Path(__file__).parent / "bin"

# (platform, arch) -> bundled directory; arch None matches any architecture
CERTUTIL_BUNDLES = {
    ("win32", "x64"): ("win64", "certutil.exe"),
    ("win32", "ia32"): ("win32", "certutil.exe"),
    ("darwin", None): ("mac", "certutil"),
    ("linux", "x64"): ("linux64", "certutil"),
    ("linux", "ia32"): ("linux32", "certutil"),
}

# SSL, S/MIME and object signing: trusted CA for all three
TRUST_ATTRIBUTES = "C,C,C"

SQL_DB_FILE = "cert9.db"
DBM_DB_FILE = "cert8.db"


def get_nss_profile_dir(env: HostEnvironment) -> str:
    """Firefox profile root of the current user."""
    override = env.get(NSS_PROFILE_DIR_ENV)
    if override:
        return override
    if env.platform == "win32":
        return env.user_profile + "\\AppData\\Roaming\\Mozilla\\Firefox\\Profiles"
    if env.platform == "darwin":
        return env.home + "/Library/Application Support/Firefox/Profiles/"
    if env.platform == "linux":
        return env.home + "/.mozilla/firefox/"
    return ""


def get_certutil_path(
    env: HostEnvironment,
    bundle_dir: Path = BUNDLED_NSS_DIR,
    is_file: Callable[[str], bool] = lambda p: Path(p).is_file(),
    resolve_command: Callable[[str], Optional[str]] = which,
) -> str:
    """
    Locate the NSS certutil binary for this host.

    Raises:
        UnsupportedPlatform: No certutil build exists for the platform/arch pair
            and none is installed on the search path
    """
    override = env.get(CERTUTIL_ENV)
    if override:
        return override

    bundle = CERTUTIL_BUNDLES.get((env.platform, env.arch)) or CERTUTIL_BUNDLES.get((env.platform, None))
    bundled = str(bundle_dir / bundle[0] / bundle[1]) if bundle else None
    if bundled and (env.is_windows or is_file(bundled)):
        return bundled

    # Windows ships an unrelated certutil, so PATH is only searched elsewhere
    if env.platform in ("darwin", "linux"):
        installed = resolve_command("certutil")
        if installed:
            logger.debug(f"No bundled certutil for {env.platform}/{env.arch}, using {installed}")
            return installed

    if bundled is None:
        raise UnsupportedPlatform(f"NSS is not supported on {env.platform}/{env.arch}")
    return bundled


class NssTrust(Trust):
    """Adds root certificates to every Firefox profile database of the user."""

    name = "Nss"

    def __init__(
        self,
        *args,
        certutil_path: Optional[str] = None,
        profile_dir: Optional[str] = None,
        resolve_command: Callable[[str], Optional[str]] = which,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.nss_profile_dir = profile_dir or get_nss_profile_dir(self.env)
        self.certutil_path = certutil_path or get_certutil_path(
            self.env, is_file=self.fs.is_file, resolve_command=resolve_command
        )
        logger.debug(f"NSS profile root {self.nss_profile_dir}, certutil {self.certutil_path}")

    def _join(self, *parts: str) -> str:
        return (ntpath if self.env.is_windows else posixpath).join(*parts)

    def _quote(self, value: str) -> str:
        return quote_arg(value, windows=self.env.is_windows)

    def get_firefox_databases(self) -> List[NssDatabase]:
        """
        Scan the profile root for certificate databases.

        A profile with cert9.db is addressed as sql:, one with only cert8.db as
        dbm:. Profiles with neither are skipped. The scan is repeated on every
        call since profiles come and go while the browser is installed.
        """
        try:
            entries = self.fs.list_dir(self.nss_profile_dir)
        except OSError as e:
            logger.warning(f"Firefox profile directory not readable: {self.nss_profile_dir} ({e})")
            return []

        databases: List[NssDatabase] = []
        for entry in entries:
            profile = self._join(self.nss_profile_dir, entry)
            if not self.fs.is_dir(profile):
                continue
            if self.fs.is_file(self._join(profile, SQL_DB_FILE)):
                databases.append(NssDatabase(DatabaseKind.SQL, profile))
            elif self.fs.is_file(self._join(profile, DBM_DB_FILE)):
                databases.append(NssDatabase(DatabaseKind.DBM, profile))

        if not databases:
            logger.warning(f"No profiles with cert8 or cert9 databases found in {self.nss_profile_dir}")
        return databases

    def _require_databases(self) -> List[NssDatabase]:
        databases = self.get_firefox_databases()
        if not databases:
            raise ProfileDiscoveryError(
                f"No profiles with cert8 or cert9 dbs found in firefox directory {self.nss_profile_dir}"
            )
        return databases

    async def install(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        self.require_certificate(cert_path)
        nickname = name or extract_common_name(cert_path)

        for db in self._require_databases():
            result = await self.run_elevated(
                f"{self._quote(self.certutil_path)} -A -d {self._quote(str(db))} -t {self._quote(TRUST_ATTRIBUTES)} "
                f"-n {self._quote(nickname)} -i {self._quote(str(cert_path))}"
            )
            self.handle_install_result(result, Operation.ADD)
        return True

    async def uninstall(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        nickname = name or extract_common_name(cert_path)

        for db in self._require_databases():
            result = await self.run_elevated(
                f"{self._quote(self.certutil_path)} -D -d {self._quote(str(db))} -n {self._quote(nickname)}"
            )
            self.handle_install_result(result, Operation.REMOVE)
        return True

    async def exists(self, cert_path: PathLike, name: Optional[str] = None) -> bool:
        try:
            nickname = name or extract_common_name(cert_path)
            databases = self.get_firefox_databases()
        except Exception as e:
            logger.debug(f"Could not check NSS databases: {e}")
            return False

        if not databases:
            return False

        all_exist = True
        for db in databases:
            try:
                await self.executor.run(
                    f"{self._quote(self.certutil_path)} -V -d {self._quote(str(db))} -n {self._quote(nickname)} -u L"
                )
            except Exception as e:
                logger.debug(f"Certificate '{nickname}' not valid in {db}: {e}")
                all_exist = False
        return all_exist
