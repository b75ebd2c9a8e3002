from __future__ import annotations

from typing import List

import pytest

from wslprovision.core.runner import Step, StepRunner
from wslprovision.exceptions import BoundaryError, CommandError, RemediationError
from wslprovision.models.results import ProbeResult, StepOutcome


def _step(name: str, calls: List[str], probe=None, **kwargs) -> Step:
    def apply() -> None:
        calls.append(name)

    return Step(name=name, description=name, apply=apply, probe=probe, **kwargs)


def _failing(name: str, calls: List[str], **kwargs) -> Step:
    def apply() -> None:
        calls.append(name)
        raise CommandError(f"do-{name}", 1, "boom")

    return Step(name=name, description=name, apply=apply, always_apply=True, **kwargs)


def test_satisfied_step_is_skipped_without_remediation(reporter) -> None:
    calls: List[str] = []
    report = StepRunner(reporter).run([_step("a", calls, probe=lambda: ProbeResult.SATISFIED)])

    assert calls == []
    assert report.outcome_of("a") == StepOutcome.SKIPPED
    assert report.steps[0].probe == ProbeResult.SATISFIED


def test_unsatisfied_step_is_applied(reporter) -> None:
    calls: List[str] = []
    report = StepRunner(reporter).run([_step("a", calls, probe=lambda: ProbeResult.UNSATISFIED)])

    assert calls == ["a"]
    assert report.outcome_of("a") == StepOutcome.APPLIED


def test_unknown_probe_is_applied_and_reported_as_warning(reporter) -> None:
    calls: List[str] = []
    report = StepRunner(reporter).run([_step("a", calls, probe=lambda: ProbeResult.UNKNOWN)])

    assert calls == ["a"]
    assert report.outcome_of("a") == StepOutcome.APPLIED
    assert report.steps[0].probe == ProbeResult.UNKNOWN
    assert reporter.at("WARNING")


def test_probe_raising_boundary_error_counts_as_unknown(reporter) -> None:
    calls: List[str] = []

    def probe() -> ProbeResult:
        raise BoundaryError("wsl.exe missing")

    report = StepRunner(reporter).run([_step("a", calls, probe=probe)])

    assert calls == ["a"]
    assert report.steps[0].probe == ProbeResult.UNKNOWN


def test_always_apply_step_is_never_probed(reporter) -> None:
    calls: List[str] = []

    def probe() -> ProbeResult:
        raise AssertionError("always-apply steps must not be probed")

    step = _step("grant", calls, probe=probe, always_apply=True)
    report = StepRunner(reporter).run([step, step])

    assert calls == ["grant", "grant"]
    assert [s.outcome for s in report.steps] == [StepOutcome.APPLIED, StepOutcome.APPLIED]
    assert report.steps[0].probe is None


def test_disabled_step_short_circuits_without_probing(reporter) -> None:
    calls: List[str] = []

    def probe() -> ProbeResult:
        raise AssertionError("disabled steps must not be probed")

    report = StepRunner(reporter).run([_step("cuda", calls, probe=probe, enabled=False)])

    assert calls == []
    assert report.outcome_of("cuda") == StepOutcome.SKIPPED
    assert report.steps[0].detail == "disabled"


def test_critical_failure_aborts_remaining_steps(reporter) -> None:
    calls: List[str] = []
    steps = [
        _failing("install", calls),
        _step("account", calls, always_apply=True),
        _step("grant", calls, always_apply=True),
    ]

    with pytest.raises(RemediationError) as excinfo:
        StepRunner(reporter).run(steps)

    assert calls == ["install"]
    err = excinfo.value
    assert err.step_name == "install"
    assert err.report.aborted is True
    assert err.report.failed_step == "install"
    assert [s.name for s in err.report.steps] == ["install"]
    assert err.report.outcome_of("account") is None
    assert reporter.at("ERROR")


def test_non_critical_failure_is_reported_and_run_continues(reporter) -> None:
    calls: List[str] = []
    steps = [
        _failing("default-user", calls, critical=False),
        _step("profile", calls, always_apply=True),
    ]

    report = StepRunner(reporter).run(steps)

    assert calls == ["default-user", "profile"]
    assert report.outcome_of("default-user") == StepOutcome.FAILED
    assert report.outcome_of("profile") == StepOutcome.APPLIED
    assert report.aborted is False
    assert not report.is_success


def test_steps_run_in_declared_order(reporter) -> None:
    calls: List[str] = []
    steps = [_step(name, calls, always_apply=True) for name in ("one", "two", "three")]

    StepRunner(reporter).run(steps)

    assert calls == ["one", "two", "three"]
    assert reporter.at("STEP") == ["[1/3] one", "[2/3] two", "[3/3] three"]


def test_step_requires_probe_unless_always_applied() -> None:
    with pytest.raises(ValueError):
        Step(name="x", description="x", apply=lambda: None)


@pytest.mark.parametrize(
    "probe, expected",
    [
        (ProbeResult.SATISFIED, False),
        (ProbeResult.UNSATISFIED, True),
        (ProbeResult.UNKNOWN, True),
    ],
)
def test_only_satisfied_probe_skips_remediation(reporter, probe, expected) -> None:
    calls: List[str] = []

    StepRunner(reporter).run([_step("a", calls, probe=lambda: probe)])

    assert probe.needs_remediation is expected
    assert (calls == ["a"]) is expected
