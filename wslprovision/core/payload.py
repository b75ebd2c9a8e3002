"""Configuration payload injector: move text into guest files byte-for-byte."""

import base64
import posixpath
import shlex
from typing import Optional, Sequence, Union

from wslprovision.constants import ROOT_USER
from wslprovision.models.results import ExecutionResult
from wslprovision.utils import shell_bool


def encode_payload(content: Union[str, bytes]) -> str:
    """Base64-encode payload text. The alphabet is safe inside single quotes."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return base64.b64encode(content).decode("ascii")


def build_write_script(
    path: str,
    content: Union[str, bytes],
    append: bool = False,
    mode: Optional[str] = None,
    owner: Optional[str] = None,
    make_parents: bool = True,
) -> str:
    """
    Build the single guest command that decodes and writes a payload.

    The payload only meets the guest shell after decoding, as file content,
    so quotes, `$` and backticks in it are never interpreted.
    """
    quoted_path = shlex.quote(path)
    redirect = ">>" if append else ">"
    commands = ["set -e"]
    if make_parents:
        commands.append(f"mkdir -p {shlex.quote(posixpath.dirname(path) or '/')}")
    commands.append(
        f"printf '%s' '{encode_payload(content)}' | base64 -d {redirect} {quoted_path}"
    )
    if mode:
        commands.append(f"chmod {shlex.quote(mode)} {quoted_path}")
    if owner:
        commands.append(f"chown {shlex.quote(owner)} {quoted_path}")
    return "; ".join(commands)


def script_arguments(args: Sequence[Union[str, bool, int]]) -> list[str]:
    """Render positional arguments for a guest script (booleans as true/false)."""
    rendered = []
    for arg in args:
        if isinstance(arg, bool):
            rendered.append(shell_bool(arg))
        else:
            rendered.append(str(arg))
    return rendered


class PayloadInjector:
    """Writes payloads into the guest filesystem through the WSL boundary."""

    def __init__(self, wsl):
        """
        Initialize injector.

        Args:
            wsl: WslService (or compatible executor)
        """
        self.wsl = wsl

    def write(
        self,
        path: str,
        content: Union[str, bytes],
        user: str = ROOT_USER,
        mode: Optional[str] = None,
        owner: Optional[str] = None,
        append: bool = False,
    ) -> ExecutionResult:
        """
        Write (or append) content to a guest file in one invocation.

        Raises:
            CommandError: If the guest command fails
        """
        script = build_write_script(path, content, append=append, mode=mode, owner=owner)
        return self.wsl.shell(script, user=user, check=True)

    def run_script(
        self,
        path: str,
        args: Sequence[Union[str, bool, int]] = (),
        user: str = ROOT_USER,
    ) -> ExecutionResult:
        """
        Execute a written script with explicit positional arguments.

        Arguments travel as separate argv entries, not through guest
        environment inheritance.

        Raises:
            CommandError: If the script exits non-zero
        """
        return self.wsl.run(["bash", path, *script_arguments(args)], user=user, check=True)
