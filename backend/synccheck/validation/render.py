"""Text rendering of diagnostics, compiler style.

    models.py:12:5: error: Model Job has ... [Job.missing_default_values_on_model]
    models.py:14:5: note: 'owner' declared here
"""

from __future__ import annotations

from synccheck.schemas.validation import Diagnostic

Position = tuple[int | None, int | None]


def _location(path: str, position: Position | None) -> str:
    line, column = position or (None, None)
    if line is None:
        return path
    if column is None:
        return f"{path}:{line}"
    return f"{path}:{line}:{column}"


def render_diagnostic(
    diagnostic: Diagnostic,
    positions: dict[str, Position],
    path: str = "<source>",
) -> list[str]:
    """One primary line at the first affected field, then a note per field."""
    first = diagnostic.affected_fields[0]
    lines = [
        f"{_location(path, positions.get(first))}: "
        f"{diagnostic.severity.value}: {diagnostic.message} [{diagnostic.identity}]"
    ]
    for name in diagnostic.affected_fields:
        lines.append(f"{_location(path, positions.get(name))}: note: '{name}' declared here")
    return lines
