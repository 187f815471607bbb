"""Validation router — stateless model declaration checks."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from synccheck.errors import DeclarationSourceError
from synccheck.schemas.declaration import (
    ModelDeclaration,
    SourceValidationRequest,
    SourceValidationResponse,
)
from synccheck.schemas.validation import ValidationReport
from synccheck.services.validation_service import (
    build_source_response,
    validate_declaration,
    validate_source,
)
from synccheck.validation.escalation import EscalationPolicy

router = APIRouter()


@router.post("/declarations", response_model=ValidationReport)
async def validate_model_declaration(declaration: ModelDeclaration):
    """Validate one model from its raw member records."""
    return validate_declaration(declaration)


@router.post("/batch", response_model=list[ValidationReport])
async def validate_model_batch(declarations: list[ModelDeclaration]):
    """Validate several models independently. Order is preserved."""
    return [validate_declaration(decl) for decl in declarations]


@router.post("/source", response_model=SourceValidationResponse)
async def validate_python_source(
    request: SourceValidationRequest,
    policy: EscalationPolicy | None = Query(
        None, description="Override the configured escalation policy"
    ),
):
    """Validate every model class declared in a Python module."""
    try:
        results = validate_source(request.source, path=request.path)
    except DeclarationSourceError as exc:
        raise HTTPException(
            status_code=422,
            detail=str(exc),
        )
    return build_source_response([report for _, report in results], policy)
