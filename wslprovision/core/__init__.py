"""
wslprovision Convergence Engine

Step model, runner, payload injection, secret handoff and templates.
"""

from .runner import Step, StepRunner
from .provisioner import Provisioner
from .payload import PayloadInjector
from .config_loader import ConfigLoader

__all__ = [
    "Step",
    "StepRunner",
    "Provisioner",
    "PayloadInjector",
    "ConfigLoader",
]
