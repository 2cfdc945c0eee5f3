"""Shell command execution, unprivileged and elevated."""

import asyncio
import base64
import logging
import os
import shlex
import shutil
from typing import Optional

from root_trust.environment import HostEnvironment
from root_trust.exceptions import CommandError
from root_trust.models import CommandResult

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "root-trust"


def which(command: str) -> Optional[str]:
    """Resolve a command on the search path."""
    return shutil.which(command)


def quote_arg(value: str, windows: bool = False) -> str:
    """Quote one argument for the host shell (cmd.exe or POSIX sh)."""
    if windows:
        return '"' + value.replace('"', '""') + '"'
    return shlex.quote(value)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


async def _run_shell(command: str) -> CommandResult:
    logger.debug(f"Running: {command}")
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.debug(f"Could not spawn command: {e}")
        return CommandResult(command=command, stderr=str(e), returncode=127)

    stdout, stderr = await process.communicate()
    result = CommandResult(
        command=command,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        returncode=process.returncode if process.returncode is not None else -1,
    )
    logger.debug(f"Exit status {result.returncode}")
    if result.stdout:
        logger.debug(f"stdout: {result.stdout.strip()}")
    if result.stderr:
        logger.debug(f"stderr: {result.stderr.strip()}")
    return result


class CommandExecutor:
    """Runs commands as the current user."""

    async def run(self, command: str) -> CommandResult:
        """
        Run a shell command to completion.

        Raises:
            CommandError: The command exited with a non-zero status
        """
        result = await _run_shell(command)
        if result.returncode != 0:
            raise CommandError(result)
        return result


def _is_privileged() -> bool:
    if hasattr(os, "geteuid"):
        return os.geteuid() == 0
    try:
        import ctypes

        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError):
        return False


def _applescript_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _powershell_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class ElevatedExecutor:
    """
    Runs commands with administrator privileges.

    The label only brands the password prompt. A non-zero exit does not raise;
    callers inspect the returned CommandResult.
    """

    def __init__(self, env: Optional[HostEnvironment] = None, label: Optional[str] = None):
        self.env = env or HostEnvironment.from_host()
        self.label = label or DEFAULT_LABEL

    def wrap(self, command: str, label: Optional[str] = None) -> str:
        """Return the command line that runs `command` elevated on this host."""
        label = label or self.label
        if _is_privileged():
            return command
        if self.env.is_windows:
            # UAC prompt via RunAs; output of the elevated process is not captured
            script = (
                f"$p = Start-Process -FilePath cmd.exe -ArgumentList {_powershell_quote('/c ' + command)} "
                "-Verb RunAs -Wait -PassThru -WindowStyle Hidden; exit $p.ExitCode"
            )
            encoded = base64.b64encode(script.encode("utf-16-le")).decode("ascii")
            return f"powershell -NoProfile -NonInteractive -EncodedCommand {encoded}"
        if self.env.platform == "darwin":
            script = (
                f"do shell script {_applescript_quote(command)} "
                f"with prompt {_applescript_quote(f'{label} wants to update the system trust store.')} "
                "with administrator privileges"
            )
            return f"osascript -e {shlex.quote(script)}"
        return f"sudo -p {shlex.quote(f'[{label}] password for %u: ')} sh -c {shlex.quote(command)}"

    async def run(self, command: str, label: Optional[str] = None) -> CommandResult:
        result = await _run_shell(self.wrap(command, label))
        return CommandResult(
            command=command,
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )
