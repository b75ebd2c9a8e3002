"""
Provisioning Configuration Model

Dataclass describing one provisioning run. Populated from the YAML config
file, CLI options and interactive prompts (in increasing precedence).
"""

import re
from dataclasses import dataclass, fields
from typing import Optional

from wslprovision.constants import (
    DEFAULT_DISTRO,
    DEFAULT_INSTALL_CUDA,
    DEFAULT_INSTALL_ZSH,
    DEFAULT_LAUNCH_SHELL,
    DEFAULT_PYTHON_VERSION,
    DEFAULT_WSL_BINARY,
)
from wslprovision.exceptions import ConfigurationError

# Same rule as useradd's default NAME_REGEX
USERNAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_-]{0,31}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PYTHON_VERSION_PATTERN = re.compile(r"^\d+\.\d+(\.\d+)?$")
DISTRO_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass
class ProvisionConfig:
    """Desired state inputs for a provisioning run."""

    distro: str = DEFAULT_DISTRO
    username: str = ""
    git_name: str = ""
    git_email: str = ""
    python_version: str = DEFAULT_PYTHON_VERSION
    install_cuda: bool = DEFAULT_INSTALL_CUDA
    install_zsh: bool = DEFAULT_INSTALL_ZSH
    launch_shell: bool = DEFAULT_LAUNCH_SHELL
    wsl_binary: str = DEFAULT_WSL_BINARY
    launcher: Optional[str] = None

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @property
    def distro_launcher(self) -> str:
        """
        Store launcher used to register a freshly installed distro.

        "Ubuntu" -> "ubuntu.exe", "Ubuntu-22.04" -> "ubuntu2204.exe"
        """
        if self.launcher:
            return self.launcher
        name = self.distro.lower().replace("-", "").replace(".", "")
        return f"{name}.exe"

    @property
    def home_dir(self) -> str:
        return f"/home/{self.username}"

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If any value is malformed
        """
        if not DISTRO_PATTERN.match(self.distro or ""):
            raise ConfigurationError(f"Invalid distro name: '{self.distro}'")

        if not USERNAME_PATTERN.match(self.username or ""):
            raise ConfigurationError(
                f"Invalid account name: '{self.username}'",
                context="Use lowercase letters, digits, '_' or '-', starting with a letter or '_'",
            )
        if self.username == "root":
            raise ConfigurationError("The provisioned account cannot be 'root'")

        if not self.git_name.strip():
            raise ConfigurationError("Git user name must not be empty")

        if not EMAIL_PATTERN.match(self.git_email or ""):
            raise ConfigurationError(f"Invalid Git email: '{self.git_email}'")

        if not PYTHON_VERSION_PATTERN.match(self.python_version or ""):
            raise ConfigurationError(
                f"Invalid Python version: '{self.python_version}'",
                context="Expected a version such as 3.12 or 3.12.7",
            )

    def __repr__(self) -> str:
        return f"ProvisionConfig(distro={self.distro}, user={self.username})"
