import base64
import os
import re
import shlex
import shutil
import sys
from typing import Dict, List, Optional, Set, Tuple

import pytest


# Make the package importable when running from a source checkout
ROOT = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


from wslprovision.exceptions import BoundaryError, CommandError  # noqa: E402
from wslprovision.models.results import ExecutionResult  # noqa: E402
from wslprovision.services.wsl_service import WslService  # noqa: E402

# What wsl.exe returns when the target distro does not exist
WSL_DISTRO_MISSING_EXIT = -1


class RecordingReporter:
    """Reporter that keeps (level, message) pairs instead of printing."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []

    def report(self, level: str, message: str) -> None:
        self.messages.append((level, message))

    def at(self, level: str) -> List[str]:
        return [message for lvl, message in self.messages if lvl == level]


class FakeWsl:
    """
    In-memory stand-in for WslService.

    Interprets the commands the provisioner issues against a small model of
    the host (registered distros, registry) and the guest (accounts, files).
    """

    def __init__(
        self,
        distro: str = "Ubuntu",
        registered: bool = False,
        version: int = 2,
        users: Optional[Dict[str, int]] = None,
        wsl_binary: str = "wsl.exe",
    ) -> None:
        self.distro = distro
        self.wsl_binary = wsl_binary
        self.distros: Dict[str, int] = {distro: version} if registered else {}
        self.default_version = 1
        self.pending_install: Optional[str] = None
        self.users: Dict[str, int] = dict(users or {})
        self.passwords: Dict[str, str] = {}
        self.groups: Dict[str, Set[str]] = {}
        self.files: Dict[str, bytes] = {}
        self.modes: Dict[str, str] = {}
        self.owners: Dict[str, str] = {}
        self.commands: Set[str] = set()
        self.registry: Dict[str, int] = {}
        self.calls: List[Tuple[str, List[str], Optional[str]]] = []
        self.failures: Dict[str, int] = {}
        self.unreachable = False
        self.scripts_run: List[Tuple[str, List[str], str]] = []
        self.sessions: List[str] = []
        self.terminations = 0
        for name in self.users:
            self.files[f"/home/{name}/.bashrc"] = b"# ~/.bashrc\n"

    # ── Test helpers ────────────────────────────────────────────────────────

    def fail(self, fragment: str, returncode: int = 1) -> None:
        """Make any command containing `fragment` exit with `returncode`."""
        self.failures[fragment] = returncode

    def commands_matching(self, fragment: str) -> List[str]:
        return [" ".join(argv) for _, argv, _ in self.calls if fragment in " ".join(argv)]

    def mutating_calls(self) -> List[str]:
        """Every call that is not a read-only probe."""
        readonly = ("--list", "id -u", "grep -qxF", "command -v", "GetValue('DefaultUid')", "test -e")
        return [
            " ".join(argv)
            for _, argv, _ in self.calls
            if not any(marker in " ".join(argv) for marker in readonly)
        ]

    # ── WslService interface ────────────────────────────────────────────────

    def run(self, argv, user="root", stdin=None, check=False) -> ExecutionResult:
        argv = list(argv)
        self.calls.append(("guest", argv, user))
        if self.unreachable:
            raise BoundaryError("wsl.exe not reachable")
        command = " ".join(argv)

        injected = self._injected_failure(command)
        if injected is not None:
            return self._result(injected, "", command, check, stderr="injected failure")
        if self.distro not in self.distros:
            return self._result(
                WSL_DISTRO_MISSING_EXIT, "", command, check,
                stderr="There is no distribution with the supplied name.",
            )
        rc, out = self._guest(argv, user, stdin)
        return self._result(rc, out, command, check)

    def shell(self, script, user="root", stdin=None, check=False) -> ExecutionResult:
        return self.run(["bash", "-c", script], user=user, stdin=stdin, check=check)

    def host(self, argv, stdin=None, check=False) -> ExecutionResult:
        argv = list(argv)
        self.calls.append(("host", argv, None))
        if self.unreachable:
            raise BoundaryError("wsl.exe not reachable")
        command = " ".join(argv)
        injected = self._injected_failure(command)
        if injected is not None:
            return self._result(injected, "", command, check, stderr="injected failure")
        rc, out = self._host(argv)
        return self._result(rc, out, command, check)

    def wsl(self, *args, check=False) -> ExecutionResult:
        return self.host([self.wsl_binary, *args], check=check)

    def list_distros(self) -> Dict[str, int]:
        result = self.wsl("--list", "--verbose")
        if result.is_failure:
            if "no installed distributions" in result.output.lower():
                return {}
            raise CommandError(result.command, result.returncode, result.output)
        from wslprovision.services.wsl_service import parse_distro_list

        return parse_distro_list(result.stdout)

    def interactive(self, user: str) -> int:
        self.sessions.append(user)
        return 0

    # ── Interpreters ────────────────────────────────────────────────────────

    def _injected_failure(self, command: str) -> Optional[int]:
        for fragment, rc in self.failures.items():
            if fragment in command:
                return rc
        return None

    @staticmethod
    def _result(rc, out, command, check, stderr="") -> ExecutionResult:
        result = ExecutionResult(returncode=rc, stdout=out, stderr=stderr, command=command)
        if check and result.is_failure:
            raise CommandError(command, rc, result.output)
        return result

    def _host(self, argv: List[str]) -> Tuple[int, str]:
        if argv[0] == self.wsl_binary:
            flag = argv[1]
            if flag == "--list":
                if not self.distros:
                    return 1, "Windows Subsystem for Linux has no installed distributions."
                lines = ["  NAME      STATE           VERSION"]
                for name, version in self.distros.items():
                    lines.append(f"* {name}    Stopped         {version}")
                return 0, "\n".join(lines) + "\n"
            if flag == "--set-default-version":
                self.default_version = int(argv[2])
                return 0, ""
            if flag == "--install":
                self.pending_install = argv[argv.index("--distribution") + 1]
                return 0, ""
            if flag == "--set-version":
                self.distros[argv[2]] = int(argv[3])
                return 0, ""
            if flag == "--terminate":
                self.terminations += 1
                return 0, ""
            return 1, f"unsupported wsl flag {flag}"

        if argv[0].endswith(".exe") and argv[1:] == ["install", "--root"]:
            if self.pending_install is None:
                return 1, "distro package not installed"
            self.distros[self.pending_install] = self.default_version
            self.pending_install = None
            return 0, ""

        if argv[0] == "powershell.exe":
            script = argv[-1]
            if self.distro not in self.distros:
                return 3, ""
            if "Set-ItemProperty" in script:
                self.registry[self.distro] = int(re.search(r"-Value (\d+)", script).group(1))
                return 0, ""
            return 0, f"{self.registry.get(self.distro, 0)}\n"

        return 1, f"unknown host command {argv[0]}"

    def _guest(self, argv: List[str], user: str, stdin) -> Tuple[int, str]:
        program = argv[0]
        if program == "id":
            name = argv[-1]
            if name in self.users:
                return 0, f"{self.users[name]}\n"
            return 1, ""
        if program == "useradd":
            name = argv[-1]
            self.users[name] = 1000 + len(self.users)
            self.files[f"/home/{name}/.bashrc"] = b"# ~/.bashrc\n"
            return 0, ""
        if program == "chpasswd":
            data = stdin.read()
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            for line in data.splitlines():
                name, password = line.split(":", 1)
                self.passwords[name] = password
            return 0, ""
        if program == "usermod":
            self.groups.setdefault(argv[-1], set()).add(argv[-2])
            return 0, ""
        if program == "visudo":
            return 0, f"{argv[-1]}: parsed OK\n"
        if program == "rm":
            self.files.pop(argv[-1], None)
            return 0, ""
        if program == "test":
            return (0, "") if argv[-1] in self.files else (1, "")
        if program == "bash" and argv[1] in ("-c", "-lc"):
            return self._bash(argv[2])
        if program == "bash":
            path = argv[1]
            if path not in self.files:
                return 127, f"bash: {path}: No such file or directory"
            self.scripts_run.append((path, argv[2:], user))
            return 0, "Bootstrap complete.\n"
        return 127, f"{program}: command not found"

    def _bash(self, script: str) -> Tuple[int, str]:
        tokens = shlex.split(script)
        if "grep" in tokens:
            index = tokens.index("grep")
            marker, path = tokens[index + 3], tokens[index + 4]
            content = self.files.get(path)
            if content is None:
                return 1, ""
            return (0, "") if marker in content.decode("utf-8").splitlines() else (1, "")
        if tokens[:2] == ["command", "-v"]:
            return (0, "") if tokens[2] in self.commands else (1, "")

        for part in script.split("; "):
            words = shlex.split(part)
            if words[0] == "printf":
                payload = base64.b64decode(words[2])
                path = words[-1]
                if words[-2] == ">>":
                    self.files[path] = self.files.get(path, b"") + payload
                else:
                    self.files[path] = payload
            elif words[0] == "chmod":
                self.modes[words[2]] = words[1]
            elif words[0] == "chown":
                self.owners[words[2]] = words[1]
        return 0, ""


class LocalShellWsl(WslService):
    """WslService that runs "guest" commands in the local shell."""

    def guest_argv(self, argv, user="root"):
        return list(argv)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def fake_wsl() -> FakeWsl:
    return FakeWsl()


@pytest.fixture
def make_wsl():
    """Factory for FakeWsl instances with a preset host/guest state."""
    return FakeWsl


@pytest.fixture
def local_shell() -> LocalShellWsl:
    """WslService whose guest is the local bash, for real decode round trips."""
    if shutil.which("bash") is None or shutil.which("base64") is None:
        pytest.skip("bash and base64 are required")
    return LocalShellWsl("local")
