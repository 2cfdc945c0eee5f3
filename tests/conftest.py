"""Shared fixtures: generated certificates, fake shells and a rooted filesystem."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from root_trust.environment import HostEnvironment
from root_trust.exceptions import CommandError
from root_trust.filesystem import Filesystem
from root_trust.models import CommandResult


def build_root_cert(common_name: Optional[str] = "Test Root CA", serial_number: int = 0x1A2B3C) -> bytes:
    """Create a self-signed root certificate as PEM."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    attributes = [x509.NameAttribute(NameOID.ORGANIZATION_NAME, "root-trust tests")]
    if common_name is not None:
        attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    name = x509.Name(attributes)
    now = datetime.now(timezone.utc)

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(serial_number)
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(private_key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def root_cert_pem() -> bytes:
    return build_root_cert()


@pytest.fixture
def cert_path(tmp_path, root_cert_pem) -> Path:
    path = tmp_path / "certs" / "root.crt"
    path.parent.mkdir()
    path.write_bytes(root_cert_pem)
    return path


@pytest.fixture
def missing_cert_path(tmp_path) -> Path:
    return tmp_path / "certs" / "does_not_exist.crt"


class FakeShell:
    """
    Records command lines and answers them through a handler.

    With ``raise_on_error`` it behaves like the unprivileged executor and
    raises CommandError on a non-zero exit status.
    """

    def __init__(
        self,
        handler: Optional[Callable[[str], CommandResult]] = None,
        raise_on_error: bool = False,
    ):
        self.handler = handler or (lambda command: CommandResult(command=command))
        self.raise_on_error = raise_on_error
        self.commands: List[str] = []
        self.labels: List[Optional[str]] = []

    async def run(self, command: str, label: Optional[str] = None) -> CommandResult:
        self.commands.append(command)
        self.labels.append(label)
        result = self.handler(command)
        if self.raise_on_error and result.returncode != 0:
            raise CommandError(result)
        return result


class RootedFilesystem(Filesystem):
    """Maps absolute store paths like /etc/... into a temporary root."""

    def __init__(self, root: Path, passthrough: Tuple[Path, ...] = ()):
        self.root = root
        self.passthrough = tuple(str(p) for p in passthrough)

    def resolve(self, path) -> Path:
        path = str(path)
        if path.startswith(self.passthrough):
            return Path(path)
        return self.root / path.lstrip("/")


def fake_env(platform: str = "linux", arch: str = "x64", **environ) -> HostEnvironment:
    return HostEnvironment(platform=platform, arch=arch, environ=environ)

