"""CLI entry points for enum-raw-values - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from enum_raw_values.domain.protocols import TelemetryPort
from enum_raw_values.interface.reporters import DiagnosticReporter
from enum_raw_values.use_cases.apply_fixes import ApplyFixesUseCase
from enum_raw_values.use_cases.check_sources import CheckSourcesUseCase
from enum_raw_values.use_cases.expand_module import ExpandModuleUseCase

# B008: module-level default for the Typer Argument
_PATHS_ARGUMENT = typer.Argument(None, help="Files or directories (default: current directory)")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    telemetry: TelemetryPort
    reporter: DiagnosticReporter
    check_use_case: CheckSourcesUseCase
    fix_use_case: ApplyFixesUseCase
    expand_use_case: ExpandModuleUseCase


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_paths(paths: Optional[list[Path]]) -> list[str]:
        """Explicit paths as strings, else the current directory."""
        if not paths:
            return ["."]
        return [str(path) for path in paths]

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
            force=True,
        )

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="enum-raw-values",
            help="Generate and check raw value companions for @enum_raw_values enums.",
            add_completion=False,
        )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
        ) -> None:
            CLIAppFactory.configure_logging(verbose)
            if verbose:
                deps.telemetry.handshake()

        @app.command()
        def check(paths: Optional[list[Path]] = _PATHS_ARGUMENT) -> None:
            """Report diagnostics; exit 1 when any error is found."""
            reports = deps.check_use_case.execute(CLIAppFactory.resolve_paths(paths))
            deps.reporter.report(reports)
            if any(report.has_errors for report in reports):
                raise typer.Exit(code=1)

        @app.command()
        def fix(
            paths: Optional[list[Path]] = _PATHS_ARGUMENT,
            choice: int = typer.Option(
                0, "--choice", help="Index of the fix to apply when a diagnostic offers several."
            ),
            dry_run: bool = typer.Option(False, "--dry-run", help="Do not write files."),
        ) -> None:
            """Apply the suggested fix of every diagnostic."""
            reports = deps.fix_use_case.execute(
                CLIAppFactory.resolve_paths(paths), choice=choice, dry_run=dry_run
            )
            for report in reports:
                for applied in report.applied_fixes:
                    deps.telemetry.step(f"{report.path}: {applied.message.text.splitlines()[0]}")
            deps.reporter.report(reports)
            if any(report.error is not None for report in reports):
                raise typer.Exit(code=1)

        @app.command()
        def expand(
            paths: Optional[list[Path]] = _PATHS_ARGUMENT,
            strip_attribute: bool = typer.Option(
                False, "--strip-attribute", help="Remove the decorator after expanding."
            ),
            check_only: bool = typer.Option(
                False, "--check", help="Write nothing; exit 1 if any file would change."
            ),
            stdout: bool = typer.Option(
                False, "--stdout", help="Print expanded modules instead of writing them."
            ),
        ) -> None:
            """Generate (or refresh) the companion class of every decorated enum."""
            reports = deps.expand_use_case.execute(
                CLIAppFactory.resolve_paths(paths),
                write=not (check_only or stdout),
                strip_attribute=strip_attribute,
            )
            if stdout:
                for report in reports:
                    if report.output is not None:
                        typer.echo(report.output, nl=False)
            else:
                deps.reporter.report(reports)
            if any(report.error is not None for report in reports):
                raise typer.Exit(code=1)
            if check_only and any(report.changed for report in reports):
                for report in reports:
                    if report.changed:
                        deps.telemetry.warning(f"{report.path} is out of date")
                raise typer.Exit(code=1)

        return app
