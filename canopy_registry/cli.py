"""canopy-registry CLI — build and validate the UI artifact registry."""

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from canopy_registry import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """canopy-registry — UI artifact registry builder.

    Scans the source UI project, publishes components, templates, providers
    and design tokens as templated files plus JSON API documents, and checks
    a built registry for missing or inconsistent files.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _load_config(config_path: str | None, registry_dir: str | None, **overrides):
    from canopy_registry.config import resolve_config
    from canopy_registry.errors import ConfigError

    try:
        config = resolve_config(config_path, registry_dir)
    except ConfigError as e:
        console.print(f"[red]Invalid configuration:[/] {e}")
        sys.exit(2)
    return config.with_overrides(**overrides)


# ── Build ────────────────────────────────────────────────────────────


@main.command()
@click.option("--registry-dir", "-r", default=None, help="Registry root (default: current directory)")
@click.option("--source-dir", "-s", default=None, help="Source UI project root (default: parent of registry)")
@click.option("--config", "config_path", default=None, help="Path to a registry.yaml config file")
@click.option("--base-url", default=None, help="Base URL artifacts are served from")
def build(registry_dir: str | None, source_dir: str | None, config_path: str | None, base_url: str | None):
    """Build every artifact, API document and the registry index."""
    from canopy_registry.registry.builder import run_build

    config = _load_config(config_path, registry_dir, source_root=source_dir, base_url=base_url)

    console.print(f"\n[bold blue]canopy-registry[/] — Building registry: {config.registry_root}\n")

    result = asyncio.run(run_build(config))

    table = Table(title="Registry Build")
    table.add_column("Kind", style="cyan")
    table.add_column("Artifacts", justify="right", style="green")
    table.add_column("Status", justify="center")
    for kind in ("components", "templates", "providers", "tokens"):
        status = "[red]FAILED[/]" if kind in result.failed_kinds else "[green]OK[/]"
        table.add_row(kind, str(len(getattr(result, kind))), status)
    console.print(table)

    for warning in result.warnings:
        console.print(f"  [yellow]![/] {warning}")
    for error in result.errors:
        console.print(f"  [red]x[/] {error}")

    console.print(f"\n  Base URL: {config.base_url}")
    if not result.success:
        console.print("\n[red]Registry build failed.[/]")
        sys.exit(1)
    console.print("\n[green]Registry build finished![/]")


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.option("--registry-dir", "-r", default=".", help="Registry root")
def validate(registry_dir: str):
    """Validate a built registry against its on-disk artifact tree.

    Every artifact is checked; all defects are reported before exiting.
    """
    from canopy_registry.validation.integrity import IntegrityValidator
    from canopy_registry.validation.report import generate_report

    console.print(f"\n[bold blue]canopy-registry[/] — Validating: {registry_dir}\n")

    report = IntegrityValidator(registry_dir).validate()

    if report.dependencies:
        console.print(f"\n[bold]Dependencies ({len(report.dependencies)}):[/]")
        for dep in report.dependencies:
            console.print(f"  {dep}")

    summary = generate_report(registry_dir)
    if summary:
        console.print(Panel("\n".join(summary.lines()), title="Registry Report"))

    if report.issues:
        console.print(f"\n[red]Defects ({len(report.issues)}):[/]")
        for issue in report.issues:
            console.print(f"  [red]x[/] {issue}")
        console.print("\n[red]Registry validation failed![/]")
        sys.exit(1)
    console.print("\n[green]Registry validation passed![/]")


@main.command(name="validate-template")
@click.argument("template_path", required=False)
@click.option("--registry-dir", "-r", default=".", help="Registry root (used when no path is given)")
def validate_template(template_path: str | None, registry_dir: str):
    """Validate template.json definitions against the template schema.

    TEMPLATE_PATH checks a single file; without it every directory under
    <registry>/templates is checked.
    """
    from pathlib import Path

    from canopy_registry.templates.schema_validator import (
        validate_all_templates,
        validate_template_file,
    )

    if template_path:
        results = {Path(template_path).parent.name: validate_template_file(template_path)}
    else:
        results = validate_all_templates(Path(registry_dir) / "templates")

    if not results:
        console.print("[yellow]No templates found.[/]")
        return

    failed = False
    for name, issues in results.items():
        if issues:
            failed = True
            console.print(f"  [red]x[/] {name}")
            for issue in issues:
                console.print(f"      - {issue}")
        else:
            console.print(f"  [green]v[/] {name}")

    if failed:
        console.print("\n[red]Some templates failed validation[/]")
        sys.exit(1)
    console.print("\n[green]All templates are valid![/]")


# ── Report ───────────────────────────────────────────────────────────


@main.command()
@click.option("--registry-dir", "-r", default=".", help="Registry root")
def report(registry_dir: str):
    """Print headline statistics of a built registry."""
    from canopy_registry.validation.report import generate_report

    summary = generate_report(registry_dir)
    if summary is None:
        console.print("[red]No usable api/index.json found.[/]")
        sys.exit(1)

    table = Table(title=f"Registry v{summary.version}")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Directory", justify="center")
    for kind, present in summary.structure.items():
        table.add_row(kind, str(summary.stats.get(kind, 0)), "[green]Y[/]" if present else "[red]N[/]")
    console.print(table)
    console.print(f"  Dependencies: {summary.dependency_count}")
    console.print(f"  Categories: {', '.join(summary.categories)}")


# ── Schema ───────────────────────────────────────────────────────────


@main.command(name="template-schema")
def dump_template_schema():
    """Print the JSON Schema for template definitions."""
    import json

    from canopy_registry.templates.schema import get_schema

    click.echo(json.dumps(get_schema(), indent=2))


if __name__ == "__main__":
    main()
