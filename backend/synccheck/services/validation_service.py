"""Validation service — runs declarations through normalizer and engine."""

from __future__ import annotations

import logging

from synccheck.config import Settings, get_settings
from synccheck.declarations.python_source import extract_models
from synccheck.errors import ModelComplianceError
from synccheck.schemas.declaration import (
    MemberKind,
    ModelDeclaration,
    SourceValidationResponse,
)
from synccheck.schemas.validation import ValidationReport, ValidationStatus
from synccheck.validation.engine import evaluate
from synccheck.validation.escalation import EscalationPolicy, escalate
from synccheck.validation.normalizer import normalize

logger = logging.getLogger(__name__)


def validate_declaration(
    declaration: ModelDeclaration, settings: Settings | None = None
) -> ValidationReport:
    """Normalize and evaluate one model declaration."""
    settings = settings or get_settings()
    fields = normalize(declaration.members, settings.relationship_markers)
    report = evaluate(declaration.model_name, fields)

    if not report.ok:
        logger.info(
            "Model %s failed %d rule(s)", declaration.model_name, len(report.diagnostics)
        )
    return report


def validate_source(
    source: str, path: str | None = None, settings: Settings | None = None
) -> list[tuple[ModelDeclaration, ValidationReport]]:
    """Validate every model class found in Python source text.

    Raises:
        DeclarationSourceError: if the source does not parse.
    """
    settings = settings or get_settings()
    declarations = extract_models(
        source,
        path=path,
        model_bases=settings.model_bases,
        model_decorators=settings.model_decorators,
    )
    return [(decl, validate_declaration(decl, settings)) for decl in declarations]


def build_source_response(
    reports: list[ValidationReport],
    policy: EscalationPolicy | str | None = None,
) -> SourceValidationResponse:
    """Summarize reports, applying the escalation policy."""
    policy = EscalationPolicy(policy or get_settings().escalation_policy)

    escalated = None
    try:
        escalate(reports, policy)
    except ModelComplianceError as exc:
        escalated = str(exc)

    status = (
        ValidationStatus.VALID
        if all(report.ok for report in reports)
        else ValidationStatus.INVALID
    )
    return SourceValidationResponse(
        status=status,
        models_checked=len(reports),
        reports=reports,
        escalated=escalated,
    )


def field_positions(
    declaration: ModelDeclaration,
) -> dict[str, tuple[int | None, int | None]]:
    """Field name → (line, column) for anchoring diagnostics."""
    positions: dict[str, tuple[int | None, int | None]] = {}
    for member in declaration.members:
        name = (member.binding_pattern or "").strip()
        if member.kind == MemberKind.STORED_PROPERTY and name and name not in positions:
            positions[name] = (member.line, member.column)
    return positions
