"""
wslprovision Services Layer

Host and guest access used by the convergence engine.
"""

from .wsl_service import WslService
from .probe_service import ProbeService
from .registry_service import RegistryService

__all__ = [
    "WslService",
    "ProbeService",
    "RegistryService",
]
