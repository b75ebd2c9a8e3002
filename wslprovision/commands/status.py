"""wslprovision CLI - Status command (probe only, never changes anything)"""

import click
from rich.table import Table

from wslprovision import constants
from wslprovision.base import BaseCommand
from wslprovision.models.results import ProbeResult
from wslprovision.services import ProbeService, RegistryService, WslService

STATUS_STYLES = {
    ProbeResult.SATISFIED: ("✅", "[green]OK[/green]"),
    ProbeResult.UNSATISFIED: ("❌", "[red]Missing[/red]"),
    ProbeResult.UNKNOWN: ("⏳", "[yellow]Unknown[/yellow]"),
}


class StatusCommand(BaseCommand):
    """Report the probed state of every provisioning step."""

    def __init__(self, distro: str, username: str, wsl_binary: str, json_output: bool = False):
        super().__init__(json_output=json_output)
        self.distro = distro
        self.username = username
        self.wsl = WslService(distro, wsl_binary=wsl_binary)
        self.registry = RegistryService(self.wsl)
        self.prober = ProbeService(self.wsl, registry=self.registry)

    def collect(self) -> list[tuple[str, ProbeResult, str]]:
        """Run all probes. Later checks are UNKNOWN when the distro is absent."""
        rows = []
        registered = self.prober.distro_registered(self.distro)
        rows.append(("Distro registered", registered, self.distro))

        if registered != ProbeResult.SATISFIED:
            for check in ("WSL version", "Account", "Sudo drop-in", "Default user",
                          "Shell profile", "Docker", "pyenv"):
                rows.append((check, ProbeResult.UNKNOWN, "distro not available"))
            return rows

        version = self.prober.distro_version(self.distro)
        rows.append(("WSL version", self.prober.distro_is_wsl2(self.distro), f"WSL {version}"))

        account = self.prober.account_exists(self.username)
        rows.append(("Account", account, self.username))

        sudoers = f"{constants.SUDOERS_DIR}/{self.username}"
        rows.append(("Sudo drop-in", self.prober.path_exists(sudoers), sudoers))

        uid = self.prober.account_uid(self.username)
        rows.append((
            "Default user",
            self.prober.default_uid_matches(self.distro, uid),
            f"uid {uid}" if uid is not None else "",
        ))

        if account == ProbeResult.SATISFIED:
            home = f"/home/{self.username}"
            profile = f"{home}/{constants.PROFILE_FILE}"
            rows.append((
                "Shell profile",
                self.prober.file_contains(profile, constants.PROFILE_MARKER, user=self.username),
                profile,
            ))
            rows.append(("Docker", self.prober.command_exists("docker"), ""))
            pyenv = f"{home}/.pyenv/bin/pyenv"
            rows.append(("pyenv", self.prober.path_exists(pyenv, user=self.username), pyenv))
        else:
            for check in ("Shell profile", "Docker", "pyenv"):
                rows.append((check, ProbeResult.UNKNOWN, "account missing"))
        return rows

    def execute(self) -> None:
        """Execute status command."""
        self.show_header(
            title="Provisioning Status",
            subtitle="Probing current state (read-only)",
            distro=self.distro,
            details={"Account": self.username},
        )

        rows = self.collect()

        if self.json_output:
            self.output_json({
                "distro": self.distro,
                "username": self.username,
                "checks": [
                    {"check": name, "result": result.value, "details": details}
                    for name, result, details in rows
                ],
            })
            return

        table = Table(title="Environment Status", title_justify="left", padding=(0, 1))
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Details", style="dim")
        for name, result, details in rows:
            icon, label = STATUS_STYLES[result]
            table.add_row(f"{icon} {name}", label, details)

        self.console.print(table)

        pending = sum(1 for _, result, _ in rows if result != ProbeResult.SATISFIED)
        if pending:
            self.print_warning(f"{pending} check(s) not satisfied. Run: wslprovision up")
        else:
            self.print_success("Everything is provisioned")


@click.command()
@click.option("--distro", "-d", default=constants.DEFAULT_DISTRO, show_default=True, help="Distro to inspect")
@click.option("--username", "-u", required=True, help="Provisioned Linux account")
@click.option("--wsl-binary", default=constants.DEFAULT_WSL_BINARY, show_default=True, help="wsl.exe path")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def status(distro, username, wsl_binary, json_output):
    """
    Show provisioning state

    Probes the host and guest without changing anything.
    """
    cmd = StatusCommand(distro, username, wsl_binary, json_output=json_output)
    cmd.run()
