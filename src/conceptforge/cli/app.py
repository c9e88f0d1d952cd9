"""
conceptforge command line.

Commands:
- render: compile a template file into framework component source
- analyze: show the concepts extracted from a template file
- validate-config: check a scaffold configuration file
- frameworks: list the available framework backends
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from conceptforge._version import get_version
from conceptforge.backends import (
    ReactFrameworkExtension,
    SvelteFrameworkExtension,
    VueFrameworkExtension,
)
from conceptforge.config import read_config_data, validate_config_file
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.errors import ConceptForgeError
from conceptforge.engine import ConceptEngine, EngineOptions, unwrap_template
from conceptforge.extensions.base import HookChain, RenderContext
from conceptforge.pipeline.processing import ProcessingOptions
from conceptforge.styling import BemStylingExtension, TailwindStylingExtension
from conceptforge.writer import component_filename, load_template, write_component, write_output

from .logger import get_logger

app = typer.Typer(
    help="conceptforge: compile framework-agnostic templates into UI components",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"conceptforge {get_version()}")
        console.print(
            f"[dim]Python {platform.python_version()} ({platform.python_implementation()})[/dim]"
        )
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """conceptforge CLI main callback for global options."""
    pass


def build_engine(verbose: bool = False) -> ConceptEngine:
    """Engine with the built-in backends registered."""
    engine = ConceptEngine(EngineOptions(verbose_errors=verbose))
    engine.register_framework(ReactFrameworkExtension())
    engine.register_framework(VueFrameworkExtension())
    engine.register_framework(SvelteFrameworkExtension())
    engine.register_styling(BemStylingExtension())
    engine.register_styling(TailwindStylingExtension())
    engine.set_default_framework("react")
    return engine


def _print_diagnostics(errors: ErrorCollector, verbose: bool) -> None:
    if errors.has_errors() or (verbose and len(errors)):
        style = "red" if errors.has_errors() else "yellow"
        console.print(errors.format_errors(), style=style, markup=False, highlight=False)


# =============================================================================
# Commands
# =============================================================================


@app.command(name="render")
def render_command(
    template_file: Annotated[Path, typer.Argument(help="Template JSON file")],
    framework: Annotated[
        str | None, typer.Option("--framework", "-f", help="Target framework")
    ] = None,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Component name")] = None,
    styling: Annotated[
        str | None, typer.Option("--styling", "-s", help="Styling extension (bem, tailwind)")
    ] = None,
    typescript: Annotated[
        bool, typer.Option("--typescript", "--ts", help="Emit TypeScript")
    ] = False,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Write the component here instead of stdout"),
    ] = None,
    enhanced: Annotated[
        bool,
        typer.Option("--enhanced", help="Enable extractors, validation and consistency checks"),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show progress")] = False,
) -> None:
    """Render a template file into component source."""
    log = get_logger("render", verbose)
    engine = build_engine(verbose)

    options = ProcessingOptions(
        framework=framework,
        component_name=name,
        language="typescript" if typescript else "javascript",
        styling=styling,
    )
    selected = framework or engine.options.default_framework or "react"
    log.info(f"Rendering {template_file} with {selected}")
    try:
        template = load_template(template_file)
        _, component = unwrap_template(template)
        if enhanced:
            result = engine.render_with_auto_enhancement(template, options)
        else:
            result = engine.render(template, options)
    except ConceptForgeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    _print_diagnostics(result.errors, verbose)
    if result.validation is not None:
        log.info(f"Validation score: {result.validation.score:.2f}")
    if not result.success:
        raise typer.Exit(1)

    if output_dir is None:
        typer.echo(result.output)
        return

    component_name = name or (
        result.component_properties.name if result.component_properties else None
    ) or "Component"
    context = RenderContext(
        component=component,
        framework=selected,
        component_name=component_name,
        language=options.language,
    )
    extension = engine.get_framework_extension(selected)
    hooks = HookChain([extension] if extension is not None else [])
    filename = component_filename(component_name, selected, typescript)
    try:
        path = write_component(result.output, filename, output_dir, hooks, context)
        if result.style_output is not None and result.style_output.styles:
            stylesheet = f"{component_name}.scss" if styling == "bem" else f"{component_name}.css"
            write_output(result.style_output.styles, stylesheet, output_dir)
    except ConceptForgeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    log.success(f"Wrote {path}")
    console.print(f"[green]✓[/green] {path}")


@app.command(name="analyze")
def analyze_command(
    template_file: Annotated[Path, typer.Argument(help="Template JSON file")],
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the concepts extracted from a template."""
    engine = build_engine()
    try:
        analysis = engine.analyze(load_template(template_file))
    except ConceptForgeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if analysis.concepts is None:
        _print_diagnostics(analysis.errors, verbose=True)
        raise typer.Exit(1)

    if output_json:
        console.print_json(analysis.concepts.model_dump_json(by_alias=True))
        return

    table = Table(title=f"Concepts in {template_file.name}")
    table.add_column("Concept")
    table.add_column("Count", justify="right")
    for concept, count in analysis.concepts.concept_counts().items():
        table.add_row(concept, str(count))
    console.print(table)
    console.print(f"\n[dim]{analysis.concepts.total_concepts()} concept(s) total[/dim]")
    _print_diagnostics(analysis.errors, verbose=True)


@app.command(name="validate-config")
def validate_config_command(
    config_file: Annotated[Path, typer.Argument(help="Scaffold config (YAML or JSON)")],
) -> None:
    """Validate a scaffold configuration file."""
    try:
        data = read_config_data(config_file)
    except ConceptForgeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    result = validate_config_file(config_file, data)
    for warning in result.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")
    if not result.is_valid:
        for error in result.errors:
            console.print(f"[red]✗ {error}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] {config_file} is valid")


@app.command(name="frameworks")
def frameworks_command() -> None:
    """List available framework backends."""
    engine = build_engine()
    table = Table(title="Framework Extensions")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Version", style="dim")
    for key in engine.get_status().frameworks:
        extension = engine.get_framework_extension(key)
        if extension is not None:
            table.add_row(key, extension.metadata.name, extension.metadata.version)
    console.print(table)


def main() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app()
