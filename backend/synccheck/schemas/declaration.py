"""Pydantic schemas for the declaration source boundary."""

from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from synccheck.schemas.validation import ValidationReport, ValidationStatus


class MemberKind(str, Enum):
    STORED_PROPERTY = "stored_property"
    COMPUTED_PROPERTY = "computed_property"
    METHOD = "method"
    NESTED_TYPE = "nested_type"
    OTHER = "other"


class TypeAnnotation(BaseModel):
    text: str
    # None = infer from the annotation text
    is_optional: bool | None = None


class RawMemberRecord(BaseModel):
    kind: MemberKind = MemberKind.STORED_PROPERTY
    binding_pattern: str | None = None
    type_annotation: TypeAnnotation | None = None
    has_initializer: bool = False
    attributes: list[str] = Field(default_factory=list)
    line: int | None = None
    column: int | None = None


class ModelDeclaration(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., min_length=1)
    members: list[RawMemberRecord] = Field(default_factory=list)
    source_path: str | None = None
    line: int | None = None


# ─── Request / Response Schemas ───


class SourceValidationRequest(BaseModel):
    """Validate every model class found in a Python module."""

    source: str
    path: str | None = Field(default=None, max_length=1024)


class SourceValidationResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    status: ValidationStatus
    models_checked: int = 0
    reports: list[ValidationReport] = Field(default_factory=list)
    escalated: str | None = Field(
        default=None,
        description="Failure message raised under the configured escalation policy",
    )
