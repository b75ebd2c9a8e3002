"""
Result Models

Dataclass models for probe results, step outcomes and command outputs.
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum


class ProbeResult(Enum):
    """State of a single desired-state check."""

    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    UNKNOWN = "unknown"

    @property
    def needs_remediation(self) -> bool:
        """Unknown is treated conservatively as unsatisfied."""
        return self != ProbeResult.SATISFIED


class StepOutcome(Enum):
    """Outcome of a convergence step."""

    SKIPPED = "skipped"
    APPLIED = "applied"
    FAILED = "failed"


@dataclass
class ExecutionResult:
    """Result of a command execution (host or guest)."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class StepReport:
    """Logged outcome of one step."""

    name: str
    description: str
    outcome: StepOutcome
    probe: Optional[ProbeResult] = None
    detail: str = ""
    duration_seconds: float = 0.0

    def __repr__(self) -> str:
        return f"StepReport(name={self.name}, outcome={self.outcome.value})"


@dataclass
class RunReport:
    """Flat log of step outcomes for a single run (no rollback)."""

    steps: list[StepReport] = field(default_factory=list)
    aborted: bool = False
    failed_step: Optional[str] = None

    def add(self, report: StepReport) -> None:
        self.steps.append(report)

    def _with_outcome(self, outcome: StepOutcome) -> list[StepReport]:
        return [s for s in self.steps if s.outcome == outcome]

    @property
    def applied(self) -> list[StepReport]:
        return self._with_outcome(StepOutcome.APPLIED)

    @property
    def skipped(self) -> list[StepReport]:
        return self._with_outcome(StepOutcome.SKIPPED)

    @property
    def failed(self) -> list[StepReport]:
        return self._with_outcome(StepOutcome.FAILED)

    @property
    def is_success(self) -> bool:
        return not self.failed

    def outcome_of(self, name: str) -> Optional[StepOutcome]:
        """Outcome of the named step, or None if it never ran."""
        for step in self.steps:
            if step.name == name:
                return step.outcome
        return None

    def __repr__(self) -> str:
        return (
            f"RunReport(applied={len(self.applied)}, skipped={len(self.skipped)}, "
            f"failed={len(self.failed)}, aborted={self.aborted})"
        )
