"""CLI entry point using Typer."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from root_trust.certificate import extract_common_name, serial_number_hex
from root_trust.environment import APP_NAME_ENV
from root_trust.exceptions import TrustError
from root_trust.linux import LinuxTrust
from root_trust.nss import NssTrust
from root_trust.resolver import SUPPORTED_TARGETS, resolve_backend

app = typer.Typer(help="Install, remove and check root certificates in the system trust stores")

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
)

logger = logging.getLogger(__name__)

TARGET_HELP = f"Trust store ({', '.join(SUPPORTED_TARGETS)}). Defaults to the host platform."


def _set_verbose(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("root_trust").setLevel(logging.DEBUG)


def _backend(target: Optional[str], app_name: Optional[str]):
    try:
        return resolve_backend(target, app_name=app_name)
    except TrustError as e:
        logger.error(str(e))
        sys.exit(2)


@app.command()
def install(
    cert: Path = typer.Argument(..., help="PEM encoded root certificate"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Nickname in NSS databases (default: issuer CN)"),
    app_name: Optional[str] = typer.Option(None, "--app-name", envvar=APP_NAME_ENV, help="Label shown in the elevation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Add a root certificate to the trust store.
    """
    _set_verbose(verbose)
    trust = _backend(target, app_name)

    try:
        asyncio.run(trust.install(cert, name))
    except TrustError as e:
        logger.error(str(e))
        sys.exit(2)
    sys.exit(0)


@app.command()
def uninstall(
    cert: Path = typer.Argument(..., help="PEM encoded root certificate"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Nickname in NSS databases (default: issuer CN)"),
    app_name: Optional[str] = typer.Option(None, "--app-name", envvar=APP_NAME_ENV, help="Label shown in the elevation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Remove a root certificate from the trust store.
    """
    _set_verbose(verbose)
    trust = _backend(target, app_name)

    try:
        asyncio.run(trust.uninstall(cert, name))
    except TrustError as e:
        logger.error(str(e))
        sys.exit(2)
    sys.exit(0)


@app.command()
def exists(
    cert: Path = typer.Argument(..., help="PEM encoded root certificate"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Nickname in NSS databases (default: issuer CN)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Check whether a root certificate is trusted. Exit code 0 if it is, 1 if not.
    """
    _set_verbose(verbose)
    trust = _backend(target, None)

    trusted = asyncio.run(trust.exists(cert, name))
    print("trusted" if trusted else "not trusted")
    sys.exit(0 if trusted else 1)


@app.command()
def info(
    cert: Optional[Path] = typer.Argument(None, help="Optional certificate to describe"),
    target: Optional[str] = typer.Option(None, "--target", "-t", help=TARGET_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Show the resolved trust store configuration.
    """
    _set_verbose(verbose)
    trust = _backend(target, None)

    lines = [f"Backend: {trust.name}", f"Host: {trust.env.platform}/{trust.env.arch}"]
    if isinstance(trust, LinuxTrust):
        lines.append(f"Anchor file: {trust.system_trust_filename or '<none>'}")
        lines.append(f"Refresh command: {' '.join(trust.system_trust_commands) or '<none>'}")
    elif isinstance(trust, NssTrust):
        lines.append(f"Profile root: {trust.nss_profile_dir}")
        lines.append(f"certutil: {trust.certutil_path}")
        databases = trust.get_firefox_databases()
        lines.append(f"Databases: {len(databases)}")
        lines.extend(f"  - {db}" for db in databases)

    if cert is not None:
        try:
            lines.append(f"Certificate: {extract_common_name(cert)} (serial {serial_number_hex(cert)})")
        except TrustError as e:
            logger.error(str(e))
            sys.exit(2)

    print("\n".join(lines))


if __name__ == "__main__":
    app()
