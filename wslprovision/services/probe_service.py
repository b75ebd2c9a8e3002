"""Probe service: side-effect free checks against host and guest state."""

import shlex
from typing import Optional

from wslprovision.constants import REQUIRED_WSL_VERSION, ROOT_USER
from wslprovision.exceptions import BoundaryError, CommandError
from wslprovision.models.results import ExecutionResult, ProbeResult


def classify(result: ExecutionResult, negative_codes: tuple[int, ...] = (1,)) -> ProbeResult:
    """
    Map a check command's exit code onto a probe result.

    Exit 0 is a positive answer, the command's documented "no" code is a
    negative answer, anything else means the check itself did not work.
    """
    if result.returncode == 0:
        return ProbeResult.SATISFIED
    if result.returncode in negative_codes:
        return ProbeResult.UNSATISFIED
    return ProbeResult.UNKNOWN


class ProbeService:
    """Environment prober. Never mutates host or guest state."""

    def __init__(self, wsl, registry=None):
        """
        Initialize probe service.

        Args:
            wsl: WslService (or compatible executor)
            registry: Optional RegistryService for host default-user checks
        """
        self.wsl = wsl
        self.registry = registry

    def _installed_distros(self) -> Optional[dict[str, int]]:
        try:
            return self.wsl.list_distros()
        except (BoundaryError, CommandError):
            return None

    def distro_registered(self, distro: str) -> ProbeResult:
        """Is the distro in the registered distro list?"""
        distros = self._installed_distros()
        if distros is None:
            return ProbeResult.UNKNOWN
        return ProbeResult.SATISFIED if distro in distros else ProbeResult.UNSATISFIED

    def distro_version(self, distro: str) -> Optional[int]:
        """WSL version the distro runs under, None if unknown or absent."""
        distros = self._installed_distros()
        if not distros:
            return None
        return distros.get(distro)

    def distro_is_wsl2(self, distro: str) -> ProbeResult:
        distros = self._installed_distros()
        if distros is None or distro not in distros:
            return ProbeResult.UNKNOWN
        if distros[distro] == REQUIRED_WSL_VERSION:
            return ProbeResult.SATISFIED
        return ProbeResult.UNSATISFIED

    def account_exists(self, username: str) -> ProbeResult:
        """Does `id -u <user>` resolve inside the guest?"""
        return self._guest_check(["id", "-u", username])

    def account_uid(self, username: str) -> Optional[int]:
        """Numeric uid of the account, None if it cannot be resolved."""
        try:
            result = self.wsl.run(["id", "-u", username], user=ROOT_USER)
        except BoundaryError:
            return None
        if result.is_failure:
            return None
        try:
            return int(result.stdout.strip())
        except ValueError:
            return None

    def command_exists(self, command: str, user: str = ROOT_USER) -> ProbeResult:
        """Does the command resolve on PATH for the given identity?"""
        script = f"command -v {shlex.quote(command)} >/dev/null"
        return self._guest_check(["bash", "-lc", script], user=user)

    def path_exists(self, path: str, user: str = ROOT_USER) -> ProbeResult:
        return self._guest_check(["test", "-e", path], user=user)

    def file_contains(self, path: str, marker: str, user: str = ROOT_USER) -> ProbeResult:
        """
        Does the guest file contain the marker line?

        A missing file counts as "no" rather than "unknown".
        """
        script = (
            f"[ ! -e {shlex.quote(path)} ] && exit 1; "
            f"grep -qxF -- {shlex.quote(marker)} {shlex.quote(path)}"
        )
        return self._guest_check(["bash", "-c", script], user=user)

    def default_uid_matches(self, distro: str, uid: Optional[int]) -> ProbeResult:
        """Is the host registry default uid for the distro already `uid`?"""
        if self.registry is None or uid is None:
            return ProbeResult.UNKNOWN
        try:
            current = self.registry.get_default_uid(distro)
        except (BoundaryError, CommandError):
            return ProbeResult.UNKNOWN
        if current is None:
            return ProbeResult.UNKNOWN
        return ProbeResult.SATISFIED if current == uid else ProbeResult.UNSATISFIED

    def _guest_check(self, argv: list[str], user: str = ROOT_USER) -> ProbeResult:
        try:
            result = self.wsl.run(argv, user=user)
        except BoundaryError:
            return ProbeResult.UNKNOWN
        return classify(result)
