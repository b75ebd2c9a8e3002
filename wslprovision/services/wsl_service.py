"""WSL service for executing commands on the host and inside the guest distro."""

import os
import subprocess
from typing import IO, Sequence, Union

from wslprovision.constants import DEFAULT_WSL_BINARY, LOG_ARG_MAX_LENGTH, ROOT_USER
from wslprovision.exceptions import BoundaryError, CommandError
from wslprovision.models.results import ExecutionResult

StdinSource = Union[str, IO, None]


def decode_console_output(raw: bytes) -> str:
    """
    Decode wsl.exe console output.

    wsl.exe emits UTF-16LE for its own messages unless WSL_UTF8 is honoured,
    while guest commands emit UTF-8. Both are handled here.

    Args:
        raw: Bytes captured from the process

    Returns:
        Decoded text with NUL bytes removed
    """
    if not raw:
        return ""

    if raw.startswith(b"\xff\xfe") or (len(raw) > 1 and raw[1:2] == b"\x00"):
        text = raw.decode("utf-16-le", errors="replace")
    else:
        text = raw.decode("utf-8", errors="replace")

    return text.replace("\ufeff", "").replace("\x00", "").replace("\r\n", "\n")


def parse_distro_list(output: str) -> dict[str, int]:
    """
    Parse `wsl.exe --list --verbose` output.

    Example input:
          NAME      STATE           VERSION
        * Ubuntu    Stopped         2

    Returns:
        Mapping of distro name to WSL version
    """
    distros: dict[str, int] = {}
    for line in output.splitlines():
        parts = line.replace("*", " ").split()
        if len(parts) < 3 or parts[0] == "NAME":
            continue
        try:
            distros[parts[0]] = int(parts[-1])
        except ValueError:
            continue
    return distros


class WslService:
    """
    Boundary executor: the only channel into the guest.

    Guest commands run as `wsl.exe -d <distro> -u <user> --exec <argv>`, so
    arguments reach the guest process without passing through a guest shell.
    """

    def __init__(
        self,
        distro: str,
        wsl_binary: str = DEFAULT_WSL_BINARY,
        logger=None,
    ):
        """
        Initialize WSL service.

        Args:
            distro: Target distro name
            wsl_binary: Path or name of wsl.exe
            logger: Optional ProvisionLogger for command/output logging
        """
        self.distro = distro
        self.wsl_binary = wsl_binary
        self.logger = logger

    def guest_argv(self, argv: Sequence[str], user: str = ROOT_USER) -> list[str]:
        """Build the host argv that runs `argv` inside the distro as `user`."""
        return [self.wsl_binary, "-d", self.distro, "-u", user, "--exec", *argv]

    def run(
        self,
        argv: Sequence[str],
        user: str = ROOT_USER,
        stdin: StdinSource = None,
        check: bool = False,
    ) -> ExecutionResult:
        """
        Execute a command inside the guest.

        Args:
            argv: Command and arguments as seen by the guest
            user: Execution identity (root or the provisioned account)
            stdin: Text or open file piped to the command
            check: Raise CommandError on non-zero exit

        Returns:
            ExecutionResult with decoded output
        """
        return self._execute(self.guest_argv(argv, user), stdin=stdin, check=check)

    def shell(
        self,
        script: str,
        user: str = ROOT_USER,
        stdin: StdinSource = None,
        check: bool = False,
    ) -> ExecutionResult:
        """Execute a bash script string inside the guest."""
        return self.run(["bash", "-c", script], user=user, stdin=stdin, check=check)

    def host(
        self, argv: Sequence[str], stdin: StdinSource = None, check: bool = False
    ) -> ExecutionResult:
        """Execute a command on the Windows host."""
        return self._execute(list(argv), stdin=stdin, check=check)

    def wsl(self, *args: str, check: bool = False) -> ExecutionResult:
        """Execute a wsl.exe management command (e.g. --list, --terminate)."""
        return self.host([self.wsl_binary, *args], check=check)

    def list_distros(self) -> dict[str, int]:
        """
        List registered distros and their WSL versions.

        Raises:
            CommandError: If wsl.exe reports an error
        """
        result = self.wsl("--list", "--verbose")
        if result.is_failure:
            # wsl.exe exits non-zero when no distro is registered yet
            if "no installed distributions" in result.output.lower():
                return {}
            raise CommandError(result.command, result.returncode, result.output)
        return parse_distro_list(result.stdout)

    def interactive(self, user: str) -> int:
        """
        Open an interactive guest session in the user's home directory.

        Returns:
            Exit code of the session
        """
        argv = [self.wsl_binary, "-d", self.distro, "-u", user, "--cd", "~"]
        self._log_command(argv)
        try:
            return subprocess.run(argv).returncode
        except OSError as e:
            raise BoundaryError(
                f"Failed to launch {self.wsl_binary}: {e}", context=self.distro
            )

    def _execute(
        self, argv: list[str], stdin: StdinSource = None, check: bool = False
    ) -> ExecutionResult:
        """Run a host process to completion. No timeout: a hung command hangs the run."""
        command = self.format_command(argv)
        self._log_command(argv)

        env = dict(os.environ)
        env["WSL_UTF8"] = "1"

        run_kwargs = {"capture_output": True, "env": env}
        if isinstance(stdin, str):
            run_kwargs["input"] = stdin.encode("utf-8")
        elif stdin is not None:
            run_kwargs["stdin"] = stdin
        else:
            run_kwargs["stdin"] = subprocess.DEVNULL

        try:
            completed = subprocess.run(argv, **run_kwargs)
        except OSError as e:
            raise BoundaryError(
                f"Failed to execute {argv[0]}: {e}", context=f"Command: {command}"
            )

        result = ExecutionResult(
            returncode=completed.returncode,
            stdout=decode_console_output(completed.stdout),
            stderr=decode_console_output(completed.stderr),
            command=command,
        )

        if self.logger:
            self.logger.log_output(result.stdout, "stdout")
            self.logger.log_output(result.stderr, "stderr")
            if result.is_failure:
                self.logger.log(f"Exit code: {result.returncode}", "DEBUG")

        if check and result.is_failure:
            raise CommandError(command, result.returncode, result.output)

        return result

    @staticmethod
    def format_command(argv: Sequence[str]) -> str:
        """Printable command line with long (encoded) arguments abbreviated."""
        parts = []
        for arg in argv:
            if len(arg) > LOG_ARG_MAX_LENGTH:
                arg = f"{arg[:LOG_ARG_MAX_LENGTH]}...<{len(arg)} chars>"
            parts.append(arg)
        return " ".join(parts)

    def _log_command(self, argv: Sequence[str]) -> None:
        if self.logger:
            self.logger.log_command(self.format_command(argv))
