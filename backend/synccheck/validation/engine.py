"""Rule Evaluation Engine — Deterministic Schema-Portability Checker.

Pure Python. No I/O. Fully unit-testable.

Validates the stored fields of one model type against the rules a
remote-sync persistence backend imposes:
  1. Every plain attribute is optional or has a default value
  2. Every relationship is optional

Each field is claimed by exactly one rule (the first whose scope
matches) and either complies with it or is listed in that rule's
diagnostic.

Input:  model name + FieldDescriptor list (declaration order)
Output: ValidationReport with at most one Diagnostic per rule
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from synccheck.schemas.field import FieldDescriptor
from synccheck.schemas.validation import (
    Diagnostic,
    DiagnosticKind,
    ValidationReport,
    ValidationSeverity,
)

logger = logging.getLogger(__name__)

FieldPredicate = Callable[[FieldDescriptor], bool]


@dataclass(frozen=True)
class ComplianceRule:
    """A predicate over fields mapped to the diagnostic it produces.

    ``scope`` selects the fields the rule is responsible for;
    ``complies`` decides whether a field in scope is acceptable.
    """

    kind: DiagnosticKind
    scope: FieldPredicate
    complies: FieldPredicate
    severity: ValidationSeverity = ValidationSeverity.ERROR


# ─── Predicates ───


def _is_attribute(field: FieldDescriptor) -> bool:
    return not field.is_relationship


def _is_relationship(field: FieldDescriptor) -> bool:
    return field.is_relationship


def _is_recoverable(field: FieldDescriptor) -> bool:
    """Attribute can be rebuilt from a partial record."""
    return field.is_optional or field.has_default_value


def _is_optional(field: FieldDescriptor) -> bool:
    return field.is_optional


# ═══════════════════════════════════════════════════════════
# Rule 1: Attributes need a default value unless optional
# ═══════════════════════════════════════════════════════════

MISSING_DEFAULT_VALUE = ComplianceRule(
    kind=DiagnosticKind.MISSING_DEFAULT_VALUE,
    scope=_is_attribute,
    complies=_is_recoverable,
)


# ═══════════════════════════════════════════════════════════
# Rule 2: Relationships must be optional
# ═══════════════════════════════════════════════════════════

NON_OPTIONAL_RELATIONSHIP = ComplianceRule(
    kind=DiagnosticKind.NON_OPTIONAL_RELATIONSHIP,
    scope=_is_relationship,
    complies=_is_optional,
)


# ═══════════════════════════════════════════════════════════
# Main Evaluator
# ═══════════════════════════════════════════════════════════

# Registry of all rules, in report order. Scopes must not overlap.
ALL_RULES: list[ComplianceRule] = [
    MISSING_DEFAULT_VALUE,
    NON_OPTIONAL_RELATIONSHIP,
]


def classify(
    field: FieldDescriptor,
    rules: Sequence[ComplianceRule] | None = None,
) -> ComplianceRule | None:
    """Return the rule a field violates, or None if it is compliant."""
    for rule in rules if rules is not None else ALL_RULES:
        if rule.scope(field):
            return None if rule.complies(field) else rule
    return None


def evaluate(
    model_name: str,
    fields: Sequence[FieldDescriptor],
    rules: Sequence[ComplianceRule] | None = None,
) -> ValidationReport:
    """Run all (or selected) rules over the fields of one model.

    Args:
        model_name: Name of the model type being validated.
        fields: Stored fields in declaration order.
        rules: Optional subset of rules to evaluate.
               Defaults to ALL_RULES.

    Returns:
        ValidationReport with one Diagnostic per violated rule. Never
        raises for a violation; escalation is the caller's decision.
    """
    by_kind: dict[DiagnosticKind, ComplianceRule] = {}
    for rule in rules if rules is not None else ALL_RULES:
        # one diagnostic per kind: the first rule listed for a kind wins
        by_kind.setdefault(rule.kind, rule)
    active = list(by_kind.values())
    fields = tuple(fields)
    violations: dict[DiagnosticKind, list[str]] = {rule.kind: [] for rule in active}

    for field in fields:
        rule = classify(field, active)
        if rule is not None:
            violations[rule.kind].append(field.name)

    diagnostics = tuple(
        Diagnostic(
            kind=rule.kind,
            model_name=model_name,
            affected_fields=tuple(violations[rule.kind]),
            severity=rule.severity,
        )
        for rule in active
        if violations[rule.kind]
    )

    logger.debug(
        "Evaluated %s: %d field(s), %d diagnostic(s)",
        model_name,
        len(fields),
        len(diagnostics),
    )

    return ValidationReport(
        model_name=model_name,
        diagnostics=diagnostics,
        fields_checked=len(fields),
        rules_evaluated=len(active),
    )
