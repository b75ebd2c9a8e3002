"""Desired state for a WSL2 workstation, expressed as ordered convergence steps."""

from typing import Optional

from wslprovision import constants
from wslprovision.core import secret_handoff, templates
from wslprovision.core.payload import PayloadInjector
from wslprovision.core.runner import Step
from wslprovision.exceptions import CommandError, ProvisionError
from wslprovision.models.config import ProvisionConfig
from wslprovision.models.results import ProbeResult
from wslprovision.models.secrets import Credential


class Provisioner:
    """
    Builds the host-side step list.

    Order is fixed: distro, WSL version, account, sudo drop-in, boot config,
    default user, shell profile, guest bootstrap, restart.
    """

    def __init__(
        self,
        config: ProvisionConfig,
        wsl,
        prober,
        registry,
        credential: Optional[Credential] = None,
    ):
        """
        Initialize provisioner.

        Args:
            config: Validated provisioning configuration
            wsl: WslService (boundary executor)
            prober: ProbeService
            registry: RegistryService
            credential: Password for a newly created account
        """
        self.config = config
        self.wsl = wsl
        self.prober = prober
        self.registry = registry
        self.credential = credential
        self.injector = PayloadInjector(wsl)

    @property
    def username(self) -> str:
        return self.config.username

    @property
    def sudoers_path(self) -> str:
        return f"{constants.SUDOERS_DIR}/{self.username}"

    @property
    def profile_path(self) -> str:
        return f"{self.config.home_dir}/{constants.PROFILE_FILE}"

    def build_steps(self) -> list[Step]:
        distro = self.config.distro
        return [
            Step(
                name="distro-present",
                description=f"Install distro {distro}",
                probe=lambda: self.prober.distro_registered(distro),
                apply=self.install_distro,
            ),
            Step(
                name="distro-version",
                description=f"Ensure {distro} runs on WSL {constants.REQUIRED_WSL_VERSION}",
                probe=lambda: self.prober.distro_is_wsl2(distro),
                apply=self.upgrade_distro,
            ),
            Step(
                name="account",
                description=f"Create account '{self.username}'",
                probe=lambda: self.prober.account_exists(self.username),
                apply=self.create_account,
            ),
            Step(
                name="privilege-grant",
                description=f"Grant passwordless sudo to '{self.username}'",
                apply=self.grant_privileges,
                always_apply=True,
            ),
            Step(
                name="boot-config",
                description="Enable systemd in /etc/wsl.conf",
                apply=self.write_boot_config,
                always_apply=True,
            ),
            Step(
                name="default-user",
                description=f"Make '{self.username}' the default user",
                probe=self.probe_default_user,
                apply=self.set_default_user,
                critical=False,
            ),
            Step(
                name="shell-profile",
                description="Add pyenv and ~/.local/bin to the shell profile",
                probe=lambda: self.prober.file_contains(
                    self.profile_path, constants.PROFILE_MARKER, user=self.username
                ),
                apply=self.append_profile,
                critical=False,
            ),
            Step(
                name="bootstrap",
                description="Run guest bootstrap (tools, Git, Docker, Python, optional components)",
                apply=self.run_bootstrap,
                always_apply=True,
            ),
            Step(
                name="restart-distro",
                description=f"Restart {distro} to apply boot configuration",
                apply=self.restart_distro,
                always_apply=True,
                critical=False,
            ),
        ]

    # ── Remediations ────────────────────────────────────────────────────────

    def install_distro(self) -> None:
        distro = self.config.distro
        self.wsl.wsl("--set-default-version", str(constants.REQUIRED_WSL_VERSION), check=True)
        self.wsl.wsl("--install", "--distribution", distro, "--no-launch", check=True)
        # Registers the distro without the interactive first-run user prompt
        self.wsl.host([self.config.distro_launcher, "install", "--root"], check=True)

    def upgrade_distro(self) -> None:
        self.wsl.wsl(
            "--set-version",
            self.config.distro,
            str(constants.REQUIRED_WSL_VERSION),
            check=True,
        )

    def create_account(self) -> None:
        """
        Create the account, set its password, add it to the sudo group.

        Only runs when the account is absent: an existing account keeps its
        current password even if a different one was entered.
        """
        if self.credential is None or self.credential.is_erased:
            raise ProvisionError(
                f"No password available for new account '{self.username}'"
            )

        self.wsl.run(
            [
                "useradd",
                "--create-home",
                "--shell",
                constants.DEFAULT_SHELL,
                self.username,
            ],
            check=True,
        )
        secret_handoff.consume(
            self.credential,
            lambda handle: self.wsl.run(["chpasswd"], stdin=handle, check=True),
        )
        self.wsl.run(
            ["usermod", "-aG", constants.PRIVILEGED_GROUP, self.username], check=True
        )

    def grant_privileges(self) -> None:
        """Overwrite the sudoers drop-in, keeping it only if visudo accepts it."""
        path = self.sudoers_path
        self.injector.write(
            path,
            templates.render_sudoers(self.username),
            mode=constants.SUDOERS_MODE,
            owner="root:root",
        )
        result = self.wsl.run(["visudo", "-cf", path])
        if result.is_failure:
            self.wsl.run(["rm", "-f", path])
            raise CommandError(result.command, result.returncode, result.output)

    def write_boot_config(self) -> None:
        self.injector.write(
            constants.WSL_CONF_PATH, templates.render_wsl_conf(), mode="644"
        )

    def probe_default_user(self) -> ProbeResult:
        uid = self.prober.account_uid(self.username)
        return self.prober.default_uid_matches(self.config.distro, uid)

    def set_default_user(self) -> None:
        uid = self.prober.account_uid(self.username)
        if uid is None:
            raise ProvisionError(f"Cannot resolve uid of '{self.username}'")
        self.registry.set_default_uid(self.config.distro, uid)

    def append_profile(self) -> None:
        self.injector.write(
            self.profile_path,
            templates.render_profile(),
            user=self.username,
            append=True,
        )

    def run_bootstrap(self) -> None:
        self.injector.write(
            constants.BOOTSTRAP_PATH,
            templates.render_bootstrap(),
            mode=constants.BOOTSTRAP_MODE,
        )
        self.injector.run_script(
            constants.BOOTSTRAP_PATH,
            self.bootstrap_arguments(),
            user=self.username,
        )

    def bootstrap_arguments(self) -> list:
        """Positional arguments, in the order documented in bootstrap.sh.j2."""
        return [
            self.config.git_name,
            self.config.git_email,
            self.config.python_version,
            self.config.install_cuda,
            self.config.install_zsh,
        ]

    def restart_distro(self) -> None:
        self.wsl.wsl("--terminate", self.config.distro, check=True)
