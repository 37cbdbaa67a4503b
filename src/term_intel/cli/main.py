"""
Main CLI application for term-intel.

Provides the command-line interface for:
- Comprehending a term or question
- Inspecting and writing configuration files
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from term_intel import __version__
from term_intel.comprehension import Comprehender, Configuration, Understanding
from term_intel.config import Settings, get_default_config_path, load_config
from term_intel.core.exceptions import ComprehensionError
from term_intel.utils.logging import get_logger, setup_logging
from term_intel.utils.metrics import Metrics

app = typer.Typer(
    name="term-intel",
    help="Term Intelligence - understand terms and questions from web search",
    add_completion=False,
    no_args_is_help=True,
)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


class CLIState:
    """Root options shared by every subcommand."""

    def __init__(self) -> None:
        self.config_file: Optional[Path] = None
        self.verbose: bool = False


state = CLIState()


def version_callback(value: bool) -> None:
    """Print the version for --version."""
    if value:
        console.print(f"[bold blue]Term Intelligence[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Print the version and exit",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (default: ./config.yaml if present)",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log at DEBUG and trace each comprehension stage",
    ),
) -> None:
    """
    Term Intelligence - understand terms and questions from web search.

    Use 'term-intel --help' for command list.
    """
    state.config_file = config_file
    state.verbose = verbose


def _load_settings() -> Settings:
    """Load settings from --config, or the default location when present."""
    config_path = state.config_file or get_default_config_path()
    settings = load_config(config_path)

    if state.verbose:
        logging_settings = settings.logging.model_copy(update={"level": "DEBUG"})
        settings = settings.model_copy(update={"logging": logging_settings})

    setup_logging(settings.logging)
    return settings


@app.command()
def comprehend(
    query: str = typer.Argument(
        ...,
        help="Term or question to comprehend",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier (overrides llm.model)",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        min=1,
        help="Number of search results to request (overrides search.limit)",
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        help="Interface language hint, e.g. 'en' or 'ja' (overrides search.language)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
    show_metrics: bool = typer.Option(
        False,
        "--metrics",
        help="Print pipeline metrics after the result",
    ),
) -> None:
    """
    Comprehend a term or question.

    Searches the web for the query's keywords and asks the model for a
    definition, category and related concepts.

    Examples:
        term-intel comprehend "What is quantum entanglement?"
        term-intel comprehend 量子もつれ --language ja --json
    """
    try:
        settings = _load_settings()

        trace_logger = get_logger("cli.trace") if state.verbose else None
        base = Configuration.from_settings(settings, logger=trace_logger)
        configuration = Configuration(
            model=model or base.model,
            search_limit=limit or base.search_limit,
            logger=base.logger,
            language=language or base.language,
        )

        comprehender = Comprehender.from_settings(settings, configuration=configuration)

        if as_json:
            understanding = asyncio.run(comprehender.comprehend(query))
        else:
            with console.status("[cyan]Searching and thinking..."):
                understanding = asyncio.run(comprehender.comprehend(query))
    except ComprehensionError as e:
        err_console.print(f"[red]Error ({e.kind.value}):[/red] {e.message}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)

    if as_json:
        typer.echo(json.dumps(understanding.to_dict(), ensure_ascii=False, indent=2))
    else:
        _show_understanding(understanding)

    if show_metrics:
        err_console.print(Metrics.get().summary())


def _show_understanding(understanding: Understanding) -> None:
    """Render an Understanding as a panel."""
    console.print(f"\n[bold]Query:[/bold] {understanding.query}\n")

    body = [
        f"{understanding.definition}",
        "",
        f"[bold]Category:[/bold] {understanding.category}",
    ]
    if understanding.concepts:
        body.append("[bold]Related Concepts:[/bold]")
        body.extend(f"  • {concept}" for concept in understanding.concepts)
    body.append(f"[bold]Confidence:[/bold] {understanding.confidence * 100:.1f}%")

    console.print(Panel(
        "\n".join(body),
        title="Understanding",
        border_style="green",
    ))


@config_app.command("show")
def config_show(
    as_yaml: bool = typer.Option(
        False,
        "--yaml",
        help="Print the effective configuration as YAML",
    ),
) -> None:
    """Show the effective configuration."""
    try:
        settings = _load_settings()
    except ComprehensionError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    config_dict = settings.model_dump(mode="json")

    if as_yaml:
        typer.echo(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))
        return

    for section, values in config_dict.items():
        table = Table(title=section, show_header=False, title_justify="left")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="dim")
        for key, value in values.items():
            table.add_row(key, str(value))
        console.print(table)


@config_app.command("path")
def config_path() -> None:
    """Show which configuration file would be loaded."""
    path = state.config_file or get_default_config_path()
    if path is None:
        console.print("[dim]No configuration file found; using defaults[/dim]")
    else:
        typer.echo(str(path))


@config_app.command("init")
def config_init(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write the file (default: ./config.yaml)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing file",
    ),
) -> None:
    """Write the default configuration to a YAML file."""
    output_path = output or Path("config.yaml")

    if output_path.exists() and not force:
        if not typer.confirm(f"File {output_path} exists. Overwrite?"):
            raise typer.Exit(0)

    config_dict = Settings().model_dump(mode="json")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]Wrote default configuration to {output_path}[/green]")
    logger.debug(f"Wrote default configuration to {output_path}")


if __name__ == "__main__":
    app()
