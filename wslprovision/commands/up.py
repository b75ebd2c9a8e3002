"""wslprovision CLI - Up command (provision a WSL2 workstation)"""

from pathlib import Path
from typing import Any, Dict, Optional

import click

from wslprovision.base import BaseCommand
from wslprovision.core import ConfigLoader, Provisioner, StepRunner
from wslprovision.core import secret_handoff
from wslprovision.exceptions import PrivilegeError, RemediationError, UserDeclined
from wslprovision.models.config import ProvisionConfig
from wslprovision.models.results import ProbeResult, StepOutcome
from wslprovision.services import ProbeService, RegistryService, WslService
from wslprovision.ui_components import outcome_table
from wslprovision.utils import is_elevated


class UpCommand(BaseCommand):
    """Converge a WSL distro to the desired workstation state."""

    def __init__(
        self,
        verbose: bool = False,
        assume_yes: bool = False,
        state_dir: Optional[Path] = None,
    ):
        super().__init__(verbose=verbose, state_dir=state_dir)
        self.assume_yes = assume_yes

    def execute(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Execute up command."""
        self.show_header(
            title="Provision WSL2 Workstation",
            subtitle="User, sudo, systemd, Docker, pyenv, optional CUDA and Zsh",
        )

        if not is_elevated():
            raise PrivilegeError()

        loader = ConfigLoader(self.state_dir)
        config = loader.load(config_path, overrides)
        self._collect_inputs(config, loader.explicit_keys)
        config.validate()

        credential = secret_handoff.capture(config.username)

        try:
            self._confirm_plan(config)
            self._provision(config, credential)
        finally:
            credential.erase()

    def _collect_inputs(self, config: ProvisionConfig, explicit: set[str]) -> None:
        """Prompt for anything the config file and options did not provide."""
        if not config.username:
            config.username = click.prompt("Linux account name")
        if "install_cuda" not in explicit and not self.assume_yes:
            config.install_cuda = click.confirm(
                "Install the CUDA toolkit?", default=config.install_cuda
            )
        if "install_zsh" not in explicit and not self.assume_yes:
            config.install_zsh = click.confirm(
                "Install Zsh and Oh My Zsh?", default=config.install_zsh
            )
        if not config.git_name:
            config.git_name = click.prompt("Git user name")
        if not config.git_email:
            config.git_email = click.prompt("Git email")

    def _confirm_plan(self, config: ProvisionConfig) -> None:
        """
        Show the plan and ask before any command runs.

        Raises:
            UserDeclined: If the operator answers no
        """
        self.console.print()
        self.console.print(f"  Distro:          [cyan]{config.distro}[/cyan]")
        self.console.print(f"  Account:         [cyan]{config.username}[/cyan]")
        self.console.print(
            f"  Git identity:    [cyan]{config.git_name} <{config.git_email}>[/cyan]"
        )
        self.console.print(f"  Python:          [cyan]{config.python_version}[/cyan]")
        self.console.print(f"  CUDA toolkit:    [cyan]{'yes' if config.install_cuda else 'no'}[/cyan]")
        self.console.print(f"  Zsh/Oh My Zsh:   [cyan]{'yes' if config.install_zsh else 'no'}[/cyan]")
        self.console.print(
            "\n[dim]Existing accounts keep their current password.[/dim]\n"
        )

        if self.assume_yes:
            return
        if not self.confirm("Start provisioning?", default=False):
            raise UserDeclined()

    def _provision(self, config: ProvisionConfig, credential) -> None:
        logger = self.init_logger(config.distro, "up")
        failure: Optional[RemediationError] = None

        with logger:
            wsl = WslService(config.distro, wsl_binary=config.wsl_binary, logger=logger)
            registry = RegistryService(wsl)
            prober = ProbeService(wsl, registry=registry)
            provisioner = Provisioner(config, wsl, prober, registry, credential=credential)
            runner = StepRunner(logger)

            try:
                report = runner.run(provisioner.build_steps())
            except RemediationError as e:
                failure = e
                report = e.report

            self.console.print()
            self.console.print(outcome_table(report))

            account = next((s for s in report.steps if s.name == "account"), None)
            if (
                account
                and account.outcome == StepOutcome.SKIPPED
                and account.probe == ProbeResult.SATISFIED
            ):
                logger.warning(
                    f"Account '{config.username}' already existed, its password was not changed"
                )

        if failure:
            raise failure

        self.print_success(f"{config.distro} is provisioned")
        self._print_log_location()

        if config.launch_shell and not self.assume_yes:
            if self.confirm(f"Open a shell in {config.distro} now?", default=True):
                wsl.interactive(config.username)


@click.command()
@click.option("--distro", "-d", help="Distro to provision (default: Ubuntu)")
@click.option("--username", "-u", help="Linux account to create")
@click.option("--git-name", help="Git user.name inside the distro")
@click.option("--git-email", help="Git user.email inside the distro")
@click.option("--python-version", help="Python version installed with pyenv")
@click.option("--cuda/--no-cuda", "install_cuda", default=None, help="Install the CUDA toolkit")
@click.option("--zsh/--no-zsh", "install_zsh", default=None, help="Install Zsh and Oh My Zsh")
@click.option("--launch/--no-launch", "launch_shell", default=None, help="Offer a shell when done")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file (default: ~/.wslprovision/config.yml)",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Skip confirmation and toggle prompts")
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def up(
    distro,
    username,
    git_name,
    git_email,
    python_version,
    install_cuda,
    install_zsh,
    launch_shell,
    config_path,
    assume_yes,
    verbose,
):
    """
    Provision a WSL2 workstation

    Safe to re-run: steps that are already satisfied are skipped.

    \b
    Steps:
    - Install distro and ensure WSL 2
    - Create account, grant passwordless sudo
    - Enable systemd, set default user
    - Bootstrap tools, Git, Docker, pyenv + Python
    - Optional: CUDA toolkit, Zsh + Oh My Zsh
    """
    overrides = {
        "distro": distro,
        "username": username,
        "git_name": git_name,
        "git_email": git_email,
        "python_version": python_version,
        "install_cuda": install_cuda,
        "install_zsh": install_zsh,
        "launch_shell": launch_shell,
    }
    cmd = UpCommand(verbose=verbose, assume_yes=assume_yes)
    cmd.run(config_path=config_path, overrides=overrides)
