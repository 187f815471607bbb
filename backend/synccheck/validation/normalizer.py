"""Field Descriptor Normalizer.

Maps raw member records from a declaration source onto FieldDescriptors.
Total: records that are not stored fields, or whose name cannot be
extracted, are dropped without a diagnostic.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from synccheck.config import get_settings
from synccheck.declarations.type_forms import is_optional_type_text, marker_name
from synccheck.schemas.declaration import MemberKind, RawMemberRecord, TypeAnnotation
from synccheck.schemas.field import FieldDescriptor, FieldMarker


def marker_table(relationship_markers: Iterable[str]) -> dict[str, FieldMarker]:
    """Literal marker name → resolved marker."""
    return {marker_name(name): FieldMarker.RELATIONSHIP for name in relationship_markers}


def resolve_markers(
    attributes: Iterable[str], table: dict[str, FieldMarker]
) -> tuple[FieldMarker, ...]:
    resolved = (table.get(marker_name(attribute)) for attribute in attributes)
    return tuple(dict.fromkeys(m for m in resolved if m is not None))


def _is_optional(annotation: TypeAnnotation | None) -> bool:
    if annotation is None:
        return False
    if annotation.is_optional is not None:
        return annotation.is_optional
    return is_optional_type_text(annotation.text)


def normalize_member(
    record: RawMemberRecord, table: dict[str, FieldMarker]
) -> FieldDescriptor | None:
    if record.kind != MemberKind.STORED_PROPERTY:
        return None
    name = (record.binding_pattern or "").strip()
    if not name:
        return None

    markers = resolve_markers(record.attributes, table)
    return FieldDescriptor(
        name=name,
        is_optional=_is_optional(record.type_annotation),
        has_default_value=record.has_initializer,
        is_relationship=FieldMarker.RELATIONSHIP in markers,
        markers=markers,
        line=record.line,
        column=record.column,
    )


def normalize(
    raw_members: Sequence[RawMemberRecord],
    relationship_markers: Iterable[str] | None = None,
) -> list[FieldDescriptor]:
    """Convert raw member records into field descriptors, keeping order.

    Args:
        raw_members: Records in declaration order.
        relationship_markers: Marker names tagging a relationship field.
                              Defaults to ``Settings.relationship_markers``.
    """
    if relationship_markers is None:
        relationship_markers = get_settings().relationship_markers
    table = marker_table(relationship_markers)

    fields: list[FieldDescriptor] = []
    for record in raw_members:
        descriptor = normalize_member(record, table)
        if descriptor is not None:
            fields.append(descriptor)
    return fields
