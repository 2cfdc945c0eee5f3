"""Tests for command execution and host environment detection."""

import asyncio
import base64
import shlex
import sys
from unittest.mock import patch

import pytest

from root_trust.environment import HostEnvironment, normalize_arch, normalize_platform
from root_trust.exceptions import CommandError
from root_trust.executor import CommandExecutor, ElevatedExecutor, quote_arg

from conftest import fake_env

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell required")


@posix_only
def test_command_executor_captures_output():
    result = asyncio.run(CommandExecutor().run("echo hello; echo oops 1>&2"))

    assert result.stdout == "hello\n"
    assert result.stderr == "oops\n"
    assert result.returncode == 0


@posix_only
def test_command_executor_raises_on_failure():
    with pytest.raises(CommandError) as exc_info:
        asyncio.run(CommandExecutor().run("echo nope 1>&2; exit 3"))

    assert exc_info.value.result.returncode == 3
    assert exc_info.value.result.stderr == "nope\n"


@posix_only
def test_elevated_executor_does_not_raise():
    elevated = ElevatedExecutor(fake_env("linux"))
    with patch.object(elevated, "wrap", side_effect=lambda command, label=None: command):
        result = asyncio.run(elevated.run("exit 4"))

    assert result.returncode == 4
    assert not result.ok


def test_quote_arg_posix():
    assert quote_arg("Test Root CA") == "'Test Root CA'"
    assert quote_arg("/tmp/root.crt") == "/tmp/root.crt"


def test_quote_arg_windows():
    assert quote_arg("C:\\certs\\root.cer", windows=True) == '"C:\\certs\\root.cer"'


@patch("root_trust.executor._is_privileged", return_value=False)
def test_elevated_wrap_linux_uses_sudo(mock_privileged):
    wrapped = ElevatedExecutor(fake_env("linux"), label="Dev Proxy").wrap("update-ca-certificates")

    argv = shlex.split(wrapped)
    assert argv[0] == "sudo"
    assert argv[-3:] == ["sh", "-c", "update-ca-certificates"]
    assert "Dev Proxy" in argv[2]


@patch("root_trust.executor._is_privileged", return_value=False)
def test_elevated_wrap_macos_uses_osascript(mock_privileged):
    wrapped = ElevatedExecutor(fake_env("darwin"), label="Dev Proxy").wrap('security delete-certificate -c "A CA"')

    argv = shlex.split(wrapped)
    assert argv[:2] == ["osascript", "-e"]
    assert 'do shell script "security delete-certificate -c \\"A CA\\""' in argv[2]
    assert "with administrator privileges" in argv[2]
    assert "Dev Proxy" in argv[2]


@patch("root_trust.executor._is_privileged", return_value=True)
def test_elevated_wrap_as_root_runs_directly(mock_privileged):
    assert ElevatedExecutor(fake_env("linux")).wrap("update-ca-trust extract") == "update-ca-trust extract"


@patch("root_trust.executor._is_privileged", return_value=False)
def test_elevated_wrap_windows_uses_runas(mock_privileged):
    command = "certutil -addstore \"Root\" \"C:\\Users\\o'neil\\root.cer\""
    wrapped = ElevatedExecutor(fake_env("win32")).wrap(command)

    argv = wrapped.split()
    assert argv[:4] == ["powershell", "-NoProfile", "-NonInteractive", "-EncodedCommand"]
    script = base64.b64decode(argv[4]).decode("utf-16-le")
    assert "Start-Process -FilePath cmd.exe" in script
    assert "-Verb RunAs -Wait -PassThru" in script
    assert "-ArgumentList '/c certutil -addstore \"Root\" \"C:\\Users\\o''neil\\root.cer\"'" in script
    assert script.endswith("exit $p.ExitCode")


@patch("root_trust.executor._is_privileged", return_value=True)
def test_elevated_wrap_windows_admin_runs_directly(mock_privileged):
    command = 'certutil -delstore "Root" "1a2b3c"'
    assert ElevatedExecutor(fake_env("win32")).wrap(command) == command


def test_elevated_default_label():
    elevated = ElevatedExecutor(fake_env("linux"))
    assert elevated.label == "root-trust"


@pytest.mark.parametrize(
    "value, expected",
    [("linux", "linux"), ("linux2", "linux"), ("win32", "win32"), ("cygwin", "win32"), ("darwin", "darwin")],
)
def test_normalize_platform(value, expected):
    assert normalize_platform(value) == expected


@pytest.mark.parametrize(
    "machine, expected",
    [("x86_64", "x64"), ("AMD64", "x64"), ("i686", "ia32"), ("aarch64", "arm64"), ("arm64", "arm64"), ("riscv64", "riscv64")],
)
def test_normalize_arch(machine, expected):
    assert normalize_arch(machine) == expected


def test_host_environment_from_host_reads_environ():
    env = HostEnvironment.from_host({"HOME": "/home/tester", "USERPROFILE": "C:\\Users\\tester"})

    assert env.home == "/home/tester"
    assert env.user_profile == "C:\\Users\\tester"
    assert env.platform == normalize_platform(sys.platform)
