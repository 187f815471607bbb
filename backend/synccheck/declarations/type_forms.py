"""Syntactic queries over type annotations and attribute markers.

Everything here is purely syntactic: no imports are resolved, so
``Optional`` is recognised by name whether it came from ``typing`` or
anywhere else.
"""

from __future__ import annotations

import ast

# Wrappers that do not change whether the wrapped type is optional
TRANSPARENT_WRAPPERS = frozenset({"Mapped", "Annotated", "Final", "Required", "NotRequired"})


def dotted_tail(node: ast.expr) -> str | None:
    """Last name segment of a Name / Attribute / Subscript / Call node."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Subscript):
        return dotted_tail(node.value)
    if isinstance(node, ast.Call):
        return dotted_tail(node.func)
    return None


def _subscript_args(node: ast.Subscript) -> list[ast.expr]:
    if isinstance(node.slice, ast.Tuple):
        return list(node.slice.elts)
    return [node.slice]


def _parse_forward_ref(text: str) -> ast.expr | None:
    try:
        return ast.parse(text.strip(), mode="eval").body
    except SyntaxError:
        return None


def _resolve_forward_ref(node: ast.expr) -> ast.expr:
    """Parse a quoted annotation; unparsable text stays a constant."""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        parsed = _parse_forward_ref(node.value)
        if parsed is not None:
            return parsed
    return node


def unwrap_annotation(node: ast.expr) -> tuple[ast.expr, list[ast.expr]]:
    """Strip ``Mapped[...]`` / ``Annotated[T, ...]`` style wrappers.

    Quoted annotations are parsed at every level, so ``"ClassVar[dict]"``
    and ``Mapped["Job | None"]`` unwrap like their unquoted forms.

    Returns the core type node and the ``Annotated`` metadata collected
    on the way down, outermost first.
    """
    metadata: list[ast.expr] = []
    node = _resolve_forward_ref(node)
    while isinstance(node, ast.Subscript) and dotted_tail(node.value) in TRANSPARENT_WRAPPERS:
        args = _subscript_args(node)
        if dotted_tail(node.value) == "Annotated":
            metadata.extend(args[1:])
        node = _resolve_forward_ref(args[0])
    return node, metadata


def _is_none(node: ast.expr) -> bool:
    if isinstance(node, ast.Constant):
        return node.value is None or node.value == "None"
    return isinstance(node, ast.Name) and node.id == "NoneType"


def _union_members(node: ast.expr) -> list[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [node]


def is_optional_node(node: ast.expr) -> bool:
    """True iff the annotation is syntactically an optional type form."""
    node, _ = unwrap_annotation(node)

    if _is_none(node):
        return True

    if isinstance(node, ast.BinOp):
        return any(is_optional_node(member) for member in _union_members(node))

    if isinstance(node, ast.Subscript):
        name = dotted_tail(node.value)
        if name == "Optional":
            return True
        if name == "Union":
            return any(is_optional_node(arg) for arg in _subscript_args(node))

    return False


def is_optional_type_text(text: str) -> bool:
    """Optional check for an annotation supplied as text.

    Accepts the postfix ``T?`` form used by other declaration front ends
    in addition to Python annotations. Unparsable text is not optional.
    """
    text = text.strip()
    if not text:
        return False
    if text.endswith("?"):
        return True
    node = _parse_forward_ref(text)
    return node is not None and is_optional_node(node)


def marker_name(attribute: str) -> str:
    """Literal name of an attribute marker.

    ``"@Relationship(deleteRule: .cascade)"`` and ``"sqlmodel.Relationship"``
    both reduce to ``"Relationship"``.
    """
    name = attribute.strip().lstrip("@")
    name = name.split("(", 1)[0].strip()
    return name.rsplit(".", 1)[-1]
