from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class DiagnosticKind(str, Enum):
    MISSING_DEFAULT_VALUE = "MissingDefaultValue"
    NON_OPTIONAL_RELATIONSHIP = "NonOptionalRelationship"


# Stable ids used by tooling to filter or suppress a kind. Never rename.
DIAGNOSTIC_IDS: dict[DiagnosticKind, str] = {
    DiagnosticKind.MISSING_DEFAULT_VALUE: "missing_default_values_on_model",
    DiagnosticKind.NON_OPTIONAL_RELATIONSHIP: "have_non_optional_relationships_on_model",
}

MESSAGE_TEMPLATES: dict[DiagnosticKind, str] = {
    DiagnosticKind.MISSING_DEFAULT_VALUE: (
        "Model {model_name} has required fields without default values: {fields}."
    ),
    DiagnosticKind.NON_OPTIONAL_RELATIONSHIP: (
        "Model {model_name} has non-optional relationships: {fields}. "
        "All relationships must be optional."
    ),
}


class DiagnosticIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    id: str

    def __str__(self) -> str:
        return f"{self.domain}.{self.id}"


class Diagnostic(BaseModel):
    """One violated compatibility rule and every field that breaks it."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    kind: DiagnosticKind
    model_name: str
    affected_fields: tuple[str, ...] = Field(min_length=1)
    severity: ValidationSeverity = ValidationSeverity.ERROR

    @field_validator("affected_fields")
    @classmethod
    def _dedupe_fields(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @computed_field
    @property
    def identity(self) -> DiagnosticIdentity:
        return DiagnosticIdentity(domain=self.model_name, id=DIAGNOSTIC_IDS[self.kind])

    @computed_field
    @property
    def message(self) -> str:
        return MESSAGE_TEMPLATES[self.kind].format(
            model_name=self.model_name,
            fields=", ".join(self.affected_fields),
        )


class ValidationStatus(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"


class ValidationReport(BaseModel):
    """Engine output for a single model type."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str
    diagnostics: tuple[Diagnostic, ...] = ()
    fields_checked: int = 0
    rules_evaluated: int = 0

    @computed_field
    @property
    def status(self) -> ValidationStatus:
        if any(d.severity == ValidationSeverity.ERROR for d in self.diagnostics):
            return ValidationStatus.INVALID
        return ValidationStatus.VALID

    @property
    def ok(self) -> bool:
        return self.status == ValidationStatus.VALID

    def of_kind(self, kind: DiagnosticKind) -> Diagnostic | None:
        for diagnostic in self.diagnostics:
            if diagnostic.kind == kind:
                return diagnostic
        return None
