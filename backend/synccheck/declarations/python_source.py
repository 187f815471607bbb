"""Python Declaration Source

Reads model classes out of Python source text and turns each class
member into a RawMemberRecord for the normalizer.

Recognised model styles:
  - SQLModel / SQLAlchemy declarative classes (by base class name,
    including subclasses of model classes defined in the same module)
  - dataclass-style classes (by decorator name)

Only syntax is inspected. Nothing is imported or executed.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Iterable

from synccheck.config import get_settings
from synccheck.declarations.type_forms import (
    dotted_tail,
    is_optional_node,
    unwrap_annotation,
)
from synccheck.errors import DeclarationSourceError
from synccheck.schemas.declaration import (
    MemberKind,
    ModelDeclaration,
    RawMemberRecord,
    TypeAnnotation,
)

logger = logging.getLogger(__name__)

PROPERTY_DECORATORS = frozenset(
    {"property", "cached_property", "hybrid_property", "computed_field", "setter", "getter"}
)


# ─── Internal Helpers ───


def _is_model_class(
    node: ast.ClassDef, bases: frozenset[str], decorators: frozenset[str]
) -> bool:
    if any(dotted_tail(base) in bases for base in node.bases):
        return True
    return any(dotted_tail(dec) in decorators for dec in node.decorator_list)


def _model_classes(
    tree: ast.Module, bases: frozenset[str], decorators: frozenset[str]
) -> list[ast.ClassDef]:
    """Model classes in a module, including subclasses of local models.

    ``class Hero(HeroBase)`` is a model when ``HeroBase`` is one, however
    deep the chain inside the module.
    """
    candidates = [node for node in ast.walk(tree) if isinstance(node, ast.ClassDef)]
    found = [node for node in candidates if _is_model_class(node, bases, decorators)]
    local_models = {node.name for node in found}

    pending = [node for node in candidates if node.name not in local_models]
    while True:
        promoted = [
            node
            for node in pending
            if any(dotted_tail(base) in local_models for base in node.bases)
        ]
        if not promoted:
            break
        found.extend(promoted)
        local_models.update(node.name for node in promoted)
        pending = [node for node in pending if node.name not in local_models]

    found.sort(key=lambda node: (node.lineno, node.col_offset))
    return found


def _attributes(annotation: ast.expr, value: ast.expr | None) -> list[str]:
    """Marker names attached to a field, in source order."""
    _, metadata = unwrap_annotation(annotation)
    names: list[str] = []
    for meta in metadata:
        name = dotted_tail(meta)
        if name:
            names.append(name)
    if isinstance(value, ast.Call):
        name = dotted_tail(value.func)
        if name:
            names.append(name)
    return list(dict.fromkeys(names))


def _annotated_member(stmt: ast.AnnAssign) -> RawMemberRecord:
    core, _ = unwrap_annotation(stmt.annotation)
    if not isinstance(stmt.target, ast.Name) or dotted_tail(core) == "ClassVar":
        return RawMemberRecord(
            kind=MemberKind.OTHER,
            line=stmt.lineno,
            column=stmt.col_offset + 1,
        )

    return RawMemberRecord(
        kind=MemberKind.STORED_PROPERTY,
        binding_pattern=stmt.target.id,
        type_annotation=TypeAnnotation(
            text=ast.unparse(stmt.annotation),
            is_optional=is_optional_node(stmt.annotation),
        ),
        has_initializer=stmt.value is not None,
        attributes=_attributes(stmt.annotation, stmt.value),
        line=stmt.lineno,
        column=stmt.col_offset + 1,
    )


def _member_record(stmt: ast.stmt) -> RawMemberRecord | None:
    """Map one class-body statement to a raw member record.

    Statements that are not members at all (docstrings, ``pass``) map
    to None.
    """
    if isinstance(stmt, ast.AnnAssign):
        return _annotated_member(stmt)

    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
        is_property = any(
            dotted_tail(dec) in PROPERTY_DECORATORS for dec in stmt.decorator_list
        )
        return RawMemberRecord(
            kind=MemberKind.COMPUTED_PROPERTY if is_property else MemberKind.METHOD,
            binding_pattern=stmt.name,
            line=stmt.lineno,
            column=stmt.col_offset + 1,
        )

    if isinstance(stmt, ast.ClassDef):
        return RawMemberRecord(
            kind=MemberKind.NESTED_TYPE,
            binding_pattern=stmt.name,
            line=stmt.lineno,
            column=stmt.col_offset + 1,
        )

    if isinstance(stmt, ast.Assign):
        target = stmt.targets[0]
        return RawMemberRecord(
            kind=MemberKind.OTHER,
            binding_pattern=target.id if isinstance(target, ast.Name) else None,
            has_initializer=True,
            line=stmt.lineno,
            column=stmt.col_offset + 1,
        )

    return None


def _members(node: ast.ClassDef) -> list[RawMemberRecord]:
    records = (_member_record(stmt) for stmt in node.body)
    return [record for record in records if record is not None]


# ─── Public API ───


def parse_source(source: str, path: str | None = None) -> ast.Module:
    try:
        return ast.parse(source, filename=path or "<source>")
    except SyntaxError as exc:
        raise DeclarationSourceError(exc.msg, path=path, line=exc.lineno) from exc


def extract_models(
    source: str,
    path: str | None = None,
    model_bases: Iterable[str] | None = None,
    model_decorators: Iterable[str] | None = None,
) -> list[ModelDeclaration]:
    """Find every model class in a module, in source order.

    Args:
        source: Python source text.
        path: Optional file path, used for error messages and carried
              on each declaration.
        model_bases: Base class names marking a model. Defaults to
                     ``Settings.model_bases``.
        model_decorators: Decorator names marking a model. Defaults to
                          ``Settings.model_decorators``.

    Raises:
        DeclarationSourceError: if the source is not valid Python.
    """
    settings = get_settings()
    bases = frozenset(model_bases if model_bases is not None else settings.model_bases)
    decorators = frozenset(
        model_decorators if model_decorators is not None else settings.model_decorators
    )

    tree = parse_source(source, path)
    classes = _model_classes(tree, bases, decorators)

    declarations = [
        ModelDeclaration(
            model_name=node.name,
            members=_members(node),
            source_path=path,
            line=node.lineno,
        )
        for node in classes
    ]
    logger.debug(
        "Extracted %d model declaration(s) from %s", len(declarations), path or "<source>"
    )
    return declarations
