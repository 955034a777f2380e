"""CLI entry point for openapi-scorer."""

import logging
from pathlib import Path

import click

from openapi_scorer.parser.loader import LoadError, build_document, load_spec
from openapi_scorer.parser.validator import ValidationResult, validate_spec
from openapi_scorer.report.generator import REPORT_FORMATS, export_report, format_location, generate_report
from openapi_scorer.scoring.config import ConfigError, ScoringConfig, load_config
from openapi_scorer.scoring.engine import ScoringEngine
from openapi_scorer.scoring.models import ScoreReport, Severity

GRADE_COLORS = {"A": "green", "B": "blue", "C": "yellow", "D": "magenta", "F": "red"}
SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "magenta",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}


def _load(source: str) -> dict:
    """Load a raw document, turning loader failures into CLI errors."""
    try:
        return load_spec(source)
    except LoadError as e:
        raise click.ClickException(str(e)) from e


def _echo_messages(title: str, messages: list[str], color: str, err: bool = False) -> None:
    click.secho(title, fg=color, err=err)
    for message in messages:
        click.secho(f"  - {message}", fg=color, err=err)


def _echo_validation(result: ValidationResult, err: bool = False) -> None:
    if result.errors:
        _echo_messages("Errors:", result.errors, "red", err=err)
    if result.warnings:
        _echo_messages("Warnings:", result.warnings, "yellow", err=err)


def _display_score(report: ScoreReport, verbose: bool) -> None:
    grade_color = GRADE_COLORS[report.grade]

    click.secho("\nScoring Results", bold=True)
    click.echo("=" * 50)
    click.echo(
        f"Overall Score: {click.style(f'{report.overall_score:g}', fg=grade_color)}"
        f"/{report.max_score:g} ({click.style(report.grade, fg=grade_color, bold=True)})"
    )
    click.echo(f"API: {report.spec_info.title} v{report.spec_info.version}")
    click.echo(f"Total Issues: {report.total_issues}")

    summary = report.summary
    for label, count, severity in (
        ("Critical", summary.critical_issues, Severity.CRITICAL),
        ("High", summary.high_issues, Severity.HIGH),
        ("Medium", summary.medium_issues, Severity.MEDIUM),
        ("Low", summary.low_issues, Severity.LOW),
    ):
        if count > 0:
            click.echo(f"  - {click.style(label + ':', fg=SEVERITY_COLORS[severity])} {count}")

    click.echo("\nCriteria Breakdown:")
    click.echo("-" * 70)
    for result in report.results:
        percentage = f"{result.score / result.max_score * 100:.1f}%" if result.max_score else "n/a"
        score_text = f"{result.score:g}/{result.max_score:g} ({percentage})"
        issues = (
            click.style(f"{len(result.issues)} issues", fg="red") if result.issues
            else click.style("ok", fg="green")
        )
        click.echo(f"{result.criterion:<30} {score_text:<18} {issues}")

    if verbose and report.total_issues > 0:
        click.echo("\nDetailed Issues:")
        click.echo("-" * 70)
        for result in report.results:
            if not result.issues:
                continue
            click.secho(f"\n{result.criterion}:", bold=True, underline=True)
            for issue in result.issues:
                click.echo(f"  {click.style('*', fg=SEVERITY_COLORS[issue.severity])} {issue.description}")
                click.echo(f"    Location: {format_location(issue)}")
                click.echo(f"    Suggestion: {issue.suggestion}")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def main(debug: bool):
    """openapi-scorer — score OpenAPI specifications for quality and completeness."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@main.command()
@click.argument("source")
@click.option("-f", "--format", "fmt", default="json", type=click.Choice(REPORT_FORMATS), help="Report format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the report to this file.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="YAML file with custom criterion weights.")
@click.option("--color/--no-color", default=True, help="Colorize terminal output.")
@click.option("--verbose", is_flag=True, help="Show warnings and every issue.")
@click.pass_context
def score(ctx: click.Context, source: str, fmt: str, output: Path | None, config_path: Path | None,
          color: bool, verbose: bool):
    """Score an OpenAPI specification file or URL."""
    if not color:
        ctx.color = False

    config = ScoringConfig()
    if config_path is not None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e

    click.secho("Loading OpenAPI specification...", fg="blue")
    raw = _load(source)

    validation = validate_spec(raw)
    if not validation.is_valid:
        click.secho("Validation failed:", fg="red", err=True)
        _echo_validation(validation, err=True)
        ctx.exit(1)
    if validation.warnings and verbose:
        _echo_messages("Warnings:", validation.warnings, "yellow")

    try:
        document = build_document(raw)
    except LoadError as e:
        raise click.ClickException(str(e)) from e

    click.secho("Specification loaded and validated", fg="green")
    click.secho("Scoring specification...", fg="blue")
    report = ScoringEngine(config).score(document)
    _display_score(report, verbose)

    if output is not None:
        try:
            export_report(report, fmt, output)
        except OSError as e:
            raise click.ClickException(f"Failed to write report to {output}: {e}") from e
        click.secho(f"Report saved to: {output}", fg="green")
    elif fmt != "json" or verbose:
        click.echo("\n" + generate_report(report, fmt))


@main.command()
@click.argument("source")
@click.pass_context
def validate(ctx: click.Context, source: str):
    """Validate OpenAPI specification structure."""
    click.secho("Loading OpenAPI specification...", fg="blue")
    result = validate_spec(_load(source))

    if result.is_valid:
        click.secho("OpenAPI specification is valid", fg="green")
        _echo_validation(result)
    else:
        click.secho("OpenAPI specification is invalid", fg="red")
        _echo_validation(result)
        ctx.exit(1)


@main.command()
@click.argument("source")
def info(source: str):
    """Show information about an OpenAPI specification."""
    click.secho("Loading OpenAPI specification...", fg="blue")
    try:
        document = build_document(_load(source))
    except LoadError as e:
        raise click.ClickException(str(e)) from e

    click.secho("\nSpecification Information:", fg="green")
    click.echo(f"Title: {document.info.title or 'N/A'}")
    click.echo(f"Version: {document.info.version or 'N/A'}")
    click.echo(f"OpenAPI Version: {document.openapi or 'N/A'}")
    if document.info.description:
        click.echo(f"Description: {document.info.description}")

    if document.servers:
        click.echo(f"Servers: {len(document.servers)}")
        for index, server in enumerate(document.servers, start=1):
            suffix = f" - {server.description}" if server.description else ""
            click.echo(f"  {index}. {server.url}{suffix}")

    click.echo(f"Paths: {len(document.paths)}")
    if document.tags:
        click.echo(f"Tags: {', '.join(tag.name for tag in document.tags)}")
    click.echo(f"Operations: {sum(1 for _ in document.iter_operations())}")

    components = document.components
    if components is not None:
        click.echo("Components:")
        extra = components.model_extra or {}
        for label, value in (
            ("Schemas", components.schemas),
            ("Security Schemes", components.security_schemes),
            ("Responses", extra.get("responses")),
            ("Parameters", extra.get("parameters")),
        ):
            if isinstance(value, dict):
                click.echo(f"  - {label}: {len(value)}")
