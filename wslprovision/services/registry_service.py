"""Registry service for the per-distro default user stored on the Windows host."""

from typing import Optional

from wslprovision.constants import LXSS_REGISTRY_PATH, POWERSHELL_BINARY
from wslprovision.exceptions import CommandError

# Exit code used by the scripts below when no key matches the distro
DISTRO_KEY_MISSING = 3


def _ps_quote(value: str) -> str:
    """Single-quote a value for PowerShell."""
    return "'" + value.replace("'", "''") + "'"


class RegistryService:
    """Reads and writes the DefaultUid value under the Lxss registry key."""

    def __init__(self, wsl, powershell: str = POWERSHELL_BINARY):
        """
        Initialize registry service.

        Args:
            wsl: WslService used to run host commands
            powershell: PowerShell executable
        """
        self.wsl = wsl
        self.powershell = powershell

    def _distro_key_script(self, distro: str) -> str:
        return (
            f"$key = Get-ChildItem {_ps_quote(LXSS_REGISTRY_PATH)} | "
            f"Where-Object {{ $_.GetValue('DistributionName') -eq {_ps_quote(distro)} }} | "
            f"Select-Object -First 1; "
            f"if (-not $key) {{ exit {DISTRO_KEY_MISSING} }}; "
        )

    def _run(self, script: str):
        return self.wsl.host(
            [self.powershell, "-NoProfile", "-NonInteractive", "-Command", script]
        )

    def get_default_uid(self, distro: str) -> Optional[int]:
        """
        Read the distro's DefaultUid.

        Returns:
            The uid, or None if the distro has no registry key

        Raises:
            CommandError: If PowerShell fails for another reason
        """
        script = self._distro_key_script(distro) + "$key.GetValue('DefaultUid')"
        result = self._run(script)
        if result.returncode == DISTRO_KEY_MISSING:
            return None
        if result.is_failure:
            raise CommandError(result.command, result.returncode, result.output)
        try:
            return int(result.stdout.strip())
        except ValueError:
            return None

    def set_default_uid(self, distro: str, uid: int) -> None:
        """
        Set the distro's DefaultUid.

        Raises:
            CommandError: If the key is missing or the write fails
        """
        script = self._distro_key_script(distro) + (
            f"Set-ItemProperty -Path $key.PSPath -Name DefaultUid -Value {int(uid)} -Type DWord"
        )
        result = self._run(script)
        if result.is_failure:
            raise CommandError(result.command, result.returncode, result.output)
