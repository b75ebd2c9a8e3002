"""wslprovision - idempotent WSL2 workstation provisioning"""

__version__ = "1.0.0"
