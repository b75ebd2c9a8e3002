"""
wslprovision Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .results import (
    ExecutionResult,
    ProbeResult,
    StepOutcome,
    StepReport,
    RunReport,
)
from .config import ProvisionConfig
from .secrets import Credential

__all__ = [
    # Results
    "ExecutionResult",
    "ProbeResult",
    "StepOutcome",
    "StepReport",
    "RunReport",
    # Config
    "ProvisionConfig",
    # Secrets
    "Credential",
]
