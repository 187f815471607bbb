"""Escalation of validation reports into a hard failure.

The engine only reports. Callers wired into a build choose how a
failing report stops the build:

  collect_all  raise once, carrying every error diagnostic
  first        raise on the first error diagnostic found
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from synccheck.errors import ModelComplianceError
from synccheck.schemas.validation import (
    Diagnostic,
    ValidationReport,
    ValidationSeverity,
)


class EscalationPolicy(str, Enum):
    COLLECT_ALL = "collect_all"
    FIRST = "first"


def failing_diagnostics(
    reports: Iterable[ValidationReport],
    policy: EscalationPolicy = EscalationPolicy.COLLECT_ALL,
) -> list[Diagnostic]:
    """Error diagnostics that the policy would escalate, in report order."""
    failing: list[Diagnostic] = []
    for report in reports:
        for diagnostic in report.diagnostics:
            if diagnostic.severity != ValidationSeverity.ERROR:
                continue
            failing.append(diagnostic)
            if policy == EscalationPolicy.FIRST:
                return failing
    return failing


def escalate(
    reports: Iterable[ValidationReport],
    policy: EscalationPolicy = EscalationPolicy.COLLECT_ALL,
) -> None:
    """Raise ModelComplianceError if any report carries an error."""
    failing = failing_diagnostics(reports, EscalationPolicy(policy))
    if failing:
        raise ModelComplianceError(failing)
