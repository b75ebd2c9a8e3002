"""
wslprovision Constants

Centralized constants for magic values, defaults, and guest paths.
"""

# Default Distro Configuration
DEFAULT_DISTRO = "Ubuntu"
DEFAULT_WSL_BINARY = "wsl.exe"
REQUIRED_WSL_VERSION = 2

# Default Toolchain Configuration
DEFAULT_PYTHON_VERSION = "3.12.7"
DEFAULT_INSTALL_CUDA = False
DEFAULT_INSTALL_ZSH = True
DEFAULT_LAUNCH_SHELL = True

# Execution identities
ROOT_USER = "root"
DEFAULT_SHELL = "/bin/bash"
PRIVILEGED_GROUP = "sudo"

# Guest paths
WSL_CONF_PATH = "/etc/wsl.conf"
SUDOERS_DIR = "/etc/sudoers.d"
SUDOERS_MODE = "600"
BOOTSTRAP_DIR = "/opt/wslprovision"
BOOTSTRAP_PATH = f"{BOOTSTRAP_DIR}/bootstrap.sh"
BOOTSTRAP_MODE = "755"
PROFILE_FILE = ".bashrc"
PROFILE_MARKER = "# >>> wslprovision profile >>>"
PROFILE_END_MARKER = "# <<< wslprovision profile <<<"

# Template resources
BOOTSTRAP_TEMPLATE = "bootstrap.sh.j2"
BOOTSTRAP_TEMPLATE_VERSION = "3"
PROFILE_TEMPLATE = "profile.sh.j2"
WSL_CONF_TEMPLATE = "wsl.conf.j2"
SUDOERS_TEMPLATE = "sudoers.j2"

# Host registry (per-distro default user)
LXSS_REGISTRY_PATH = r"HKCU:\Software\Microsoft\Windows\CurrentVersion\Lxss"
POWERSHELL_BINARY = "powershell.exe"

# Guest packages installed by the bootstrap
CORE_PACKAGES = [
    "build-essential",
    "curl",
    "wget",
    "git",
    "unzip",
    "ca-certificates",
    "gnupg",
    "jq",
    "pipx",
]
PYTHON_BUILD_PACKAGES = [
    "libssl-dev",
    "zlib1g-dev",
    "libbz2-dev",
    "libreadline-dev",
    "libsqlite3-dev",
    "libncursesw5-dev",
    "xz-utils",
    "tk-dev",
    "libxml2-dev",
    "libxmlsec1-dev",
    "libffi-dev",
    "liblzma-dev",
]
PIPX_PACKAGES = ["poetry"]
CUDA_PACKAGES = ["nvidia-cuda-toolkit"]
DOCKER_INSTALL_URL = "https://get.docker.com"
PYENV_INSTALL_URL = "https://pyenv.run"
OH_MY_ZSH_INSTALL_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"

# Local state (logs, config)
HOME_ENV_VAR = "WSLPROVISION_HOME"
DEFAULT_HOME_DIRNAME = ".wslprovision"
CONFIG_FILENAME = "config.yml"

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"

# Encoded payload arguments longer than this are abbreviated in logs
LOG_ARG_MAX_LENGTH = 120
