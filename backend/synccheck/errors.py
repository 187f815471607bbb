"""Exception types raised at the edges of the validator.

The rule engine itself never raises; these are for declaration sources
that cannot be read and for callers that escalate a failing report.
"""

from __future__ import annotations

from collections.abc import Iterable

from synccheck.schemas.validation import Diagnostic


class SynccheckError(Exception):
    """Base class for synccheck failures."""


class DeclarationSourceError(SynccheckError):
    """Raised when a declaration source cannot be parsed at all."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        self.path = path
        self.line = line
        location = path or "<source>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class ModelComplianceError(SynccheckError):
    """Raised by the escalation layer for reports carrying errors."""

    def __init__(self, diagnostics: Iterable[Diagnostic]):
        self.diagnostics = tuple(diagnostics)
        super().__init__("\n".join(d.message for d in self.diagnostics))
