from synccheck.schemas.declaration import ModelDeclaration, RawMemberRecord, TypeAnnotation
from synccheck.schemas.field import FieldDescriptor, FieldMarker
from synccheck.schemas.validation import Diagnostic, DiagnosticKind, ValidationReport

__all__ = [
    "ModelDeclaration",
    "RawMemberRecord",
    "TypeAnnotation",
    "FieldDescriptor",
    "FieldMarker",
    "Diagnostic",
    "DiagnosticKind",
    "ValidationReport",
]
