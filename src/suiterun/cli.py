"""Command-line interface for suiterun."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from suiterun import __version__
from suiterun.config import SuiteRunConfig, create_example_config, get_default_config


console = Console()
err_console = Console(stderr=True)


def print_banner() -> None:
    """Print the suiterun banner."""
    console.print(
        Panel.fit(
            "[bold blue]suiterun[/bold blue] - test-execution engine",
            subtitle=f"v{__version__}",
        )
    )


def configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_config(config_path: Optional[str]) -> tuple[SuiteRunConfig, Path]:
    """Load the configuration, falling back to defaults when none exists.

    Returns:
        The configuration and the directory its relative paths resolve against
    """
    if config_path:
        return SuiteRunConfig.from_file(config_path), Path(config_path).resolve().parent

    found = SuiteRunConfig.find_file()
    if found is None:
        return get_default_config(), Path.cwd()
    return SuiteRunConfig.from_file(found), found.parent


@click.group()
@click.version_option(version=__version__, prog_name="suiterun")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: suiterun.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """suiterun - discover, run and report test suites.

    Each test method runs in its own transaction, which is always rolled
    back afterwards.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    configure_logging(verbose)


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="suiterun.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new suiterun configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {output_path}"
        )
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
        console.print("\nNext steps:")
        console.print("  1. Point storage.datasources at your test database")
        console.print("  2. Add suite files ending in _suite.py under tests/")
        console.print("  3. Run [bold]suiterun run[/bold] to execute them")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


def _load_or_exit(ctx: click.Context) -> tuple[SuiteRunConfig, Path]:
    try:
        return load_config(ctx.obj.get("config_path"))
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("Run [bold]suiterun init[/bold] to create a configuration file")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("root", required=False, type=click.Path())
@click.option("--datasource", "-d", help="Datasource to roll back after each test")
@click.option("--filter", "-k", "name_filter", help="Only run tests whose suite::method name contains this")
@click.option("--pattern", "-p", help="Glob on suite file paths relative to the root")
@click.option("--color/--no-color", default=None, help="Force coloured output on or off")
@click.option("--html", "html_output", type=click.Path(), help="Also write an HTML summary page")
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.FloatRange(min=0, min_open=True),
    help="Per-test deadline in seconds",
)
@click.pass_context
def run(
    ctx: click.Context,
    root: Optional[str],
    datasource: Optional[str],
    name_filter: Optional[str],
    pattern: Optional[str],
    color: Optional[bool],
    html_output: Optional[str],
    timeout_seconds: Optional[float],
) -> None:
    """Discover and run suites, then print a summary."""
    config, base_dir = _load_or_exit(ctx)

    from suiterun.core.context import RunContext
    from suiterun.core.discovery import SuiteDiscovery
    from suiterun.core.runner import SuiteRunner
    from suiterun.errors import SuiteLoadError
    from suiterun.loader import resolve_object
    from suiterun.report.console import ConsoleReporter
    from suiterun.report.html import HtmlReportGenerator
    from suiterun.storage.backend import SQLiteBackend

    # Suites import the project under test by its top-level package name
    if str(base_dir) not in sys.path:
        sys.path.insert(0, str(base_dir))

    paths = config.get_absolute_paths(base_dir)
    suite_root = Path(root).resolve() if root else paths["suite_root"]

    discovery = SuiteDiscovery.from_config(config.discovery, suite_root)
    try:
        discovered = discovery.discover(pattern=pattern, name_filter=name_filter)
    except SuiteLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    reporter = ConsoleReporter(color=color if color is not None else config.report.color)
    reporter.report_warnings(discovered.warnings)

    bootstrap = None
    if config.integration.bootstrap:
        try:
            bootstrap = resolve_object(config.integration.bootstrap)
        except (ImportError, AttributeError, ValueError) as e:
            console.print(f"[red]Cannot load bootstrap {config.integration.bootstrap}:[/red] {e}")
            sys.exit(1)

    backend = None
    if config.storage.datasources:
        backend = SQLiteBackend(config.get_datasource_paths(base_dir))

    runner = SuiteRunner(
        context=RunContext(config, base_dir),
        backend=backend,
        datasource=datasource,
        bootstrap=bootstrap,
        listener=reporter,
        timeout_seconds=timeout_seconds,
    )
    summary = runner.run(discovered.suites)
    reporter.report_summary(summary)

    html_target = html_output or (str(paths["html_output"]) if "html_output" in paths else None)
    if html_target:
        generator = HtmlReportGenerator(title=config.report.title, project_name=config.project)
        report_path = generator.generate(summary, html_target)
        console.print(f"[green]Report generated:[/green] {report_path}")

    if not summary.successful:
        sys.exit(1)


@main.command(name="list")
@click.argument("root", required=False, type=click.Path())
@click.option("--pattern", "-p", help="Glob on suite file paths relative to the root")
@click.pass_context
def list_suites(ctx: click.Context, root: Optional[str], pattern: Optional[str]) -> None:
    """List discovered suites and their test methods."""
    print_banner()
    config, base_dir = _load_or_exit(ctx)

    from suiterun.core.discovery import SuiteDiscovery

    if str(base_dir) not in sys.path:
        sys.path.insert(0, str(base_dir))

    suite_root = Path(root).resolve() if root else config.get_absolute_paths(base_dir)["suite_root"]
    discovered = SuiteDiscovery.from_config(config.discovery, suite_root).discover(pattern=pattern)

    for warning in discovered.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if not discovered.suites:
        console.print(f"[yellow]No suites found under[/yellow] {suite_root}")
        return

    table = Table(title="Discovered Suites")
    table.add_column("Suite", style="cyan")
    table.add_column("Kind", style="dim")
    table.add_column("Tests", justify="right")
    table.add_column("Methods")

    for suite in discovered.suites:
        table.add_row(
            suite.qualified_name,
            suite.suite_class.kind.value,
            str(suite.test_count),
            ", ".join(suite.test_method_names),
        )

    console.print(table)
    console.print(f"\n{len(discovered.suites)} suites, {discovered.total_count} tests")


if __name__ == "__main__":
    main()
