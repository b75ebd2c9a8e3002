from __future__ import annotations

import subprocess
from typing import Any, Dict, List

import pytest

from wslprovision.exceptions import BoundaryError, CommandError
from wslprovision.services import wsl_service
from wslprovision.services.wsl_service import (
    WslService,
    decode_console_output,
    parse_distro_list,
)


class _Recorder:
    def __init__(self, returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append({"argv": argv, **kwargs})
        return subprocess.CompletedProcess(argv, self.returncode, self.stdout, self.stderr)


def test_decode_utf16_console_output() -> None:
    raw = "Ubuntu\r\n".encode("utf-16-le")

    assert decode_console_output(raw) == "Ubuntu\n"


def test_decode_utf16_with_bom() -> None:
    raw = b"\xff\xfe" + "Docker Desktop".encode("utf-16-le")

    assert decode_console_output(raw) == "Docker Desktop"


def test_decode_utf8_guest_output() -> None:
    assert decode_console_output("héllo\n".encode("utf-8")) == "héllo\n"
    assert decode_console_output(b"") == ""


def test_parse_distro_list() -> None:
    output = (
        "  NAME              STATE           VERSION\n"
        "* Ubuntu            Running         2\n"
        "  Debian            Stopped         1\n"
        "\n"
    )

    assert parse_distro_list(output) == {"Ubuntu": 2, "Debian": 1}


def test_guest_argv_uses_exec_so_no_guest_shell_parses_arguments() -> None:
    wsl = WslService("Ubuntu")

    argv = wsl.guest_argv(["id", "-u", "alice"], user="root")

    assert argv == ["wsl.exe", "-d", "Ubuntu", "-u", "root", "--exec", "id", "-u", "alice"]


def test_format_command_abbreviates_long_arguments() -> None:
    blob = "A" * 500

    command = WslService.format_command(["bash", "-c", blob])

    assert command.startswith("bash -c AAAA")
    assert "<500 chars>" in command
    assert len(command) < 200


def test_run_sets_utf8_env_and_closes_stdin(monkeypatch) -> None:
    recorder = _Recorder(stdout=b"1000\n")
    monkeypatch.setattr(wsl_service.subprocess, "run", recorder)

    result = WslService("Ubuntu").run(["id", "-u", "alice"])

    assert result.stdout == "1000\n"
    call = recorder.calls[0]
    assert call["env"]["WSL_UTF8"] == "1"
    assert call["stdin"] is subprocess.DEVNULL
    assert call["capture_output"] is True


def test_run_sends_text_stdin_as_bytes(monkeypatch) -> None:
    recorder = _Recorder()
    monkeypatch.setattr(wsl_service.subprocess, "run", recorder)

    WslService("Ubuntu").run(["cat"], stdin="payload\n")

    assert recorder.calls[0]["input"] == b"payload\n"
    assert "stdin" not in recorder.calls[0]


def test_check_raises_command_error_with_output(monkeypatch) -> None:
    monkeypatch.setattr(
        wsl_service.subprocess, "run", _Recorder(returncode=2, stderr=b"bad option")
    )

    with pytest.raises(CommandError) as excinfo:
        WslService("Ubuntu").run(["visudo", "-cf", "/x"], check=True)

    assert excinfo.value.returncode == 2
    assert "bad option" in excinfo.value.output


def test_missing_binary_is_a_boundary_error(monkeypatch) -> None:
    def explode(argv, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr(wsl_service.subprocess, "run", explode)

    with pytest.raises(BoundaryError):
        WslService("Ubuntu").wsl("--list", "--verbose")


def test_list_distros_empty_host(monkeypatch) -> None:
    message = "Windows Subsystem for Linux has no installed distributions.\r\n"
    monkeypatch.setattr(
        wsl_service.subprocess,
        "run",
        _Recorder(returncode=4294967295, stdout=message.encode("utf-16-le")),
    )

    assert WslService("Ubuntu").list_distros() == {}


def test_list_distros_other_failure_raises(monkeypatch) -> None:
    monkeypatch.setattr(
        wsl_service.subprocess, "run", _Recorder(returncode=1, stderr=b"service not running")
    )

    with pytest.raises(CommandError):
        WslService("Ubuntu").list_distros()
