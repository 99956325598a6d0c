"""CLI entry point for inkwell."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml
from dotenv import load_dotenv
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from inkwell.config import ConfigurationError, InkwellConfig, load_config, require_provider
from inkwell.config.loader import DEFAULT_CONFIG_TEMPLATE
from inkwell.inbox import InboxDispatcher, Outcome, ProcessResult, build_dispatcher
from inkwell.llm import create_llm_provider
from inkwell.logging_setup import configure_logging

app = typer.Typer(
    name="inkwell",
    help="Turn text dropped into an inbox into markdown notes.",
)

config_app = typer.Typer(help="Manage inkwell configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: InkwellConfig | None = None

_OUTCOME_STYLES = {
    Outcome.processed: "[green]processed[/green]",
    Outcome.failed: "[red]failed[/red]",
    Outcome.unread: "[yellow]unread[/yellow]",
}


def _get_config() -> InkwellConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to inkwell.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    load_dotenv(Path.cwd() / ".env", override=False)
    try:
        _config = load_config(config)
    except ConfigurationError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _display_results(results: list[ProcessResult]) -> None:
    table = Table(title=f"Inbox ({len(results)} file(s))")
    table.add_column("File", style="cyan")
    table.add_column("Outcome", justify="center")
    table.add_column("Note / Archive")
    table.add_column("Error", style="red")
    for r in results:
        if r.outcome == Outcome.processed:
            target = f"{r.slug}.md"
        elif r.archive is not None:
            target = str(r.archive.archived_path.name)
        else:
            target = "-"
        table.add_row(r.filename, _OUTCOME_STYLES[r.outcome], target, r.error or "")
    rprint(table)


def _build(cfg: InkwellConfig) -> InboxDispatcher:
    """Pre-flight: fail on configuration before any file is touched."""
    try:
        require_provider(cfg)
        llm = create_llm_provider(cfg.llm)
    except ConfigurationError as e:
        rprint(f"[red]Error:[/red] {e}")
        rprint(
            "  Copy .env.example to .env (or run [bold]inkwell config init[/bold]) "
            "and set LLM_PROVIDER, LLM_API_KEY and LLM_MODEL."
        )
        raise typer.Exit(1)
    return build_dispatcher(cfg, llm)


@app.command()
def watch(
    once: bool = typer.Option(
        False, "--once", help="Process files already in the inbox, then exit"
    ),
    inbox: Annotated[
        str | None, typer.Option("--inbox", "-i", help="Override inbox directory")
    ] = None,
) -> None:
    """Watch the inbox and turn each new text file into a note."""
    cfg = _get_config()
    if inbox:
        cfg = cfg.model_copy(
            update={"inbox": cfg.inbox.model_copy(update={"path": inbox})}
        )

    dispatcher = _build(cfg)
    rprint(
        f"[bold]Inbox[/bold] {dispatcher.inbox_dir} -> [bold]notes[/bold] {cfg.notes_dir} "
        f"(llm: {cfg.llm.provider}/{cfg.llm.model})"
    )

    if once:
        results = asyncio.run(dispatcher.run_once())
        if results:
            _display_results(results)
        return

    try:
        asyncio.run(dispatcher.watch())
    except KeyboardInterrupt:
        rprint("\n[dim]Stopped.[/dim]")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default inkwell.yaml in current directory."""
    target = Path("inkwell.yaml")
    if target.exists() and not force:
        rprint("[yellow]inkwell.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
