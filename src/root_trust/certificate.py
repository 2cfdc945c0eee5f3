"""Certificate identity extraction."""

import logging
import warnings
from pathlib import Path
from typing import Union

from cryptography import x509
from cryptography.x509.oid import NameOID

from root_trust.exceptions import CertNotFound, IdentityExtractionError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_certificate_bytes(cert_path: PathLike) -> bytes:
    try:
        return Path(cert_path).read_bytes()
    except OSError as e:
        raise CertNotFound(f"Certificate not found or unreadable: {cert_path} ({e})") from e


def load_certificate(cert_path: PathLike) -> x509.Certificate:
    """
    Load a PEM certificate from disk.

    Args:
        cert_path: Path to the PEM file

    Returns:
        Parsed certificate

    Raises:
        CertNotFound: File missing or unreadable
        IdentityExtractionError: File content is not a PEM certificate
    """
    data = _read_certificate_bytes(cert_path)

    # Non-positive serial numbers trigger a deprecation warning in cryptography
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            return x509.load_pem_x509_certificate(data)
        except ValueError as e:
            raise IdentityExtractionError(f"Not a PEM certificate: {cert_path} ({e})") from e


def extract_common_name(cert_path: PathLike) -> str:
    """
    Return the issuer common name of a certificate.

    Root certificates are self-signed, so the issuer CN is also the name the
    keychain and NSS databases list them under.
    """
    cert = load_certificate(cert_path)
    attributes = cert.issuer.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        raise IdentityExtractionError(f"Certificate has no issuer common name: {cert_path}")

    common_name = attributes[0].value
    if isinstance(common_name, bytes):
        common_name = common_name.decode("utf-8", errors="replace")
    logger.debug(f"Issuer common name of {cert_path}: {common_name}")
    return common_name


def serial_number_hex(cert_path: PathLike) -> str:
    """Serial number as lowercase hex, the way certutil prints it without spaces."""
    cert = load_certificate(cert_path)
    return format(cert.serial_number, "x")
