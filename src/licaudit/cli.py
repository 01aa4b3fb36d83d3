"""licaudit CLI interface.

Usage:
    licaudit [OPTIONS] TARGETS...

The report is written to stdout; log messages go to stderr.

Exit codes:
    0: Report written (and license files dumped, if requested)
    1: No targets given, or a fatal error in any stage
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from licaudit import __version__
from licaudit.analyzers import ToolExecutionError, ToolNotAvailableError
from licaudit.config import ConfigError, LicauditConfig, load_config
from licaudit.report import DumpIOError, EncodeError
from licaudit.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="licaudit",
    help="Audit the licenses of a build target's third-party dependencies",
    add_completion=False,
)

_logger = get_logger()


class OutputFormat(str, Enum):
    """Report encodings accepted by --format."""

    json = "json"
    csv = "csv"
    notice = "notice"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"licaudit {__version__}")
        raise typer.Exit()


def _load_config(config_path: Path | None) -> LicauditConfig:
    try:
        config = load_config(config_path=config_path)
    except (FileNotFoundError, ConfigError) as e:
        _logger.error(f"failed to load config: {e}")
        raise typer.Exit(1)
    if config.config_path:
        _logger.debug(f"Loaded config from: {config.config_path}")
    return config


@app.command()
def main(
    ctx: typer.Context,
    targets: Annotated[
        list[str] | None,
        typer.Argument(
            help="Build targets to audit (e.g. ./... or example.com/cmd/app)",
            show_default=False,
        ),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format: json, csv or notice (overrides config)",
            case_sensitive=False,
        ),
    ] = None,
    licenses_dir: Annotated[
        Path | None,
        typer.Option(
            "--licenses-dir",
            "--licenses_dir",
            help="Also write LICENSE files to this directory",
            file_okay=False,
        ),
    ] = None,
    source_roots: Annotated[
        list[Path] | None,
        typer.Option(
            "--source-root",
            "-s",
            help="Directory holding dependency sources (repeatable, overrides config)",
            file_okay=False,
        ),
    ] = None,
    workdir: Annotated[
        Path | None,
        typer.Option(
            "--workdir",
            "-C",
            help="Directory to run the build-graph query in",
            exists=True,
            file_okay=False,
        ),
    ] = None,
    skip_provenance: Annotated[
        bool,
        typer.Option(
            "--skip-provenance",
            help="Do not query version control for revision and origin URL",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Emit log messages as JSON lines"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Report every licensed repository in the dependency closure of TARGETS.

    Dependencies under the same repository root collapse into one record,
    attributed to the first dependency that reached it.
    """
    from licaudit.pipeline import AuditPipeline, PipelineOptions

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    if not targets:
        typer.echo(ctx.get_usage(), err=True)
        typer.echo(f"Try '{ctx.command_path} --help' for help.", err=True)
        _logger.error("no targets specified")
        raise typer.Exit(1)

    settings = _load_config(config)
    output_format = format.value if format else settings.output.format
    dump_dir = licenses_dir or (
        Path(settings.output.licenses_dir) if settings.output.licenses_dir else None
    )

    options = PipelineOptions(
        source_roots=list(source_roots or []),
        skip_provenance=skip_provenance,
        workdir=workdir,
    )
    pipeline = AuditPipeline(config=settings)

    try:
        dependencies = pipeline.collect(targets, options)
    except (ToolExecutionError, ToolNotAvailableError) as e:
        _logger.error(f"failed to get import paths: {e}")
        raise typer.Exit(1)

    try:
        result = pipeline.resolve(dependencies, options)
    except (ToolExecutionError, ToolNotAvailableError, OSError) as e:
        _logger.error(f"failed to get licenses: {e}")
        raise typer.Exit(1)

    report = result.report
    try:
        data = report.encode(output_format)
    except EncodeError as e:
        _logger.error(f"failed to output: {e}")
        raise typer.Exit(1)

    typer.echo(data, nl=False)

    if dump_dir is not None:
        try:
            report.dump(dump_dir)
        except DumpIOError as e:
            _logger.error(f"failed to output LICENSE files: {e}")
            raise typer.Exit(1)


if __name__ == "__main__":
    app()
