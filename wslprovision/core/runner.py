"""Convergence step runner: probe, act only when needed, log the outcome."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from wslprovision.exceptions import ProvisionError, RemediationError
from wslprovision.models.results import ProbeResult, RunReport, StepOutcome, StepReport


@dataclass
class Step:
    """
    A named unit of desired state.

    always_apply marks idempotent-by-construction writes (pure overwrites)
    that are re-applied on every run without probing. Every other step must
    provide a probe. Steps with enabled=False are skipped without probing.
    A failing critical step aborts the run, since later steps depend on it.
    """

    name: str
    description: str
    apply: Callable[[], None]
    probe: Optional[Callable[[], ProbeResult]] = None
    always_apply: bool = False
    enabled: bool = True
    critical: bool = True

    def __post_init__(self):
        if self.probe is None and not self.always_apply:
            raise ValueError(f"Step '{self.name}' needs a probe or always_apply=True")


class StepRunner:
    """Executes an ordered list of steps, strictly sequentially, failing fast."""

    def __init__(self, reporter):
        """
        Initialize runner.

        Args:
            reporter: Object with report(level, message)
        """
        self.reporter = reporter

    def run(self, steps: list[Step]) -> RunReport:
        """
        Run all steps in order.

        Returns:
            RunReport when every critical step succeeded

        Raises:
            RemediationError: When a critical step fails (report attached)
        """
        report = RunReport()

        for index, step in enumerate(steps, start=1):
            self.reporter.report("STEP", f"[{index}/{len(steps)}] {step.description}")
            step_report = self._run_step(step)
            report.add(step_report)

            if step_report.outcome == StepOutcome.FAILED and step.critical:
                report.aborted = True
                report.failed_step = step.name
                raise RemediationError(step.name, step_report.detail, report=report)

        return report

    def _run_step(self, step: Step) -> StepReport:
        start_time = time.monotonic()

        def finish(outcome: StepOutcome, probe: Optional[ProbeResult], detail: str) -> StepReport:
            return StepReport(
                name=step.name,
                description=step.description,
                outcome=outcome,
                probe=probe,
                detail=detail,
                duration_seconds=time.monotonic() - start_time,
            )

        if not step.enabled:
            self.reporter.report("SUCCESS", "Disabled, skipped")
            return finish(StepOutcome.SKIPPED, None, "disabled")

        probe: Optional[ProbeResult] = None
        if not step.always_apply:
            probe = self._probe(step)
            if not probe.needs_remediation:
                self.reporter.report("SUCCESS", "Already satisfied")
                return finish(StepOutcome.SKIPPED, probe, "already satisfied")
            if probe == ProbeResult.UNKNOWN:
                self.reporter.report("WARNING", "State could not be determined, applying anyway")

        try:
            step.apply()
        except (ProvisionError, OSError) as e:
            detail = str(e)
            self.reporter.report("ERROR", f"{step.description} failed: {detail}")
            return finish(StepOutcome.FAILED, probe, detail)

        self.reporter.report("SUCCESS", "Applied")
        return finish(StepOutcome.APPLIED, probe, "applied")

    def _probe(self, step: Step) -> ProbeResult:
        try:
            return step.probe()
        except (ProvisionError, OSError) as e:
            self.reporter.report("DEBUG", f"Probe for '{step.name}' raised: {e}")
            return ProbeResult.UNKNOWN
