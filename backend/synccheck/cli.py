"""
CLI interface for synccheck.

Thin presentation layer over the validation service, meant to run as a
build or pre-commit step. Exit status: 0 clean, 1 rule violations,
2 unreadable or unparsable input.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from synccheck.config import get_settings
from synccheck.errors import DeclarationSourceError
from synccheck.schemas.validation import DIAGNOSTIC_IDS
from synccheck.services.validation_service import (
    build_source_response,
    field_positions,
    validate_source,
)
from synccheck.validation.engine import ALL_RULES
from synccheck.validation.escalation import EscalationPolicy, failing_diagnostics
from synccheck.validation.render import render_diagnostic

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="synccheck",
    help="Check persistence model declarations for remote-sync compatibility.",
    no_args_is_help=True,
)


def _configure_logging(level: str) -> None:
    """Log to stderr so stdout stays parseable (--json)."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())


def _iter_python_files(paths: list[Path]):
    for path in paths:
        if path.is_dir():
            yield from sorted(p for p in path.rglob("*.py") if p.is_file())
        else:
            yield path


@app.command()
def check(
    paths: list[Path] = typer.Argument(..., exists=True, help="Python files or directories"),
    policy: Optional[EscalationPolicy] = typer.Option(
        None, "--policy", "-p", help="collect_all (default) or first"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print reports as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Validate every model class found in the given Python sources."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        typer.secho(f"Invalid configuration: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2)
    _configure_logging("DEBUG" if verbose else settings.log_level)
    policy = policy or settings.escalation_policy

    results = []
    files_checked = 0
    for file_path in _iter_python_files(paths):
        try:
            logger.debug("Checking %s", file_path)
            source = file_path.read_text(encoding="utf-8")
            results.extend(
                (str(file_path), decl, report)
                for decl, report in validate_source(source, path=str(file_path), settings=settings)
            )
        except (OSError, UnicodeDecodeError, DeclarationSourceError) as exc:
            typer.secho(f"{file_path}: {exc}", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=2)
        files_checked += 1

    reports = [report for _, _, report in results]
    failing = failing_diagnostics(reports, policy)

    if json_output:
        response = build_source_response(reports, policy)
        typer.echo(response.model_dump_json(indent=2))
    else:
        failing_ids = {id(d) for d in failing}
        for path, decl, report in results:
            positions = field_positions(decl)
            for diagnostic in report.diagnostics:
                if id(diagnostic) not in failing_ids:
                    continue
                for line in render_diagnostic(diagnostic, positions, path):
                    typer.echo(line)

        summary = (
            f"Checked {len(reports)} model(s) in {files_checked} file(s): "
            f"{len(failing)} error(s)."
        )
        typer.secho(summary, fg=typer.colors.RED if failing else typer.colors.GREEN)

    if failing:
        raise typer.Exit(code=1)


@app.command()
def rules():
    """List the compatibility rules and their stable diagnostic ids."""
    for rule in ALL_RULES:
        typer.echo(f"{rule.kind.value:<26} {rule.severity.value:<8} {DIAGNOSTIC_IDS[rule.kind]}")


def main():
    app()


if __name__ == "__main__":
    main()
