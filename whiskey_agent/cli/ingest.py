"""
Ingestion CLI Commands
======================

CLI commands for running extracted menus through identity resolution.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from whiskey_agent.core.enums import SourceType
from whiskey_agent.core.schema import ExtractedMenu
from whiskey_agent.ingestion.catalog import InMemoryCatalog, SqlCatalog
from whiskey_agent.ingestion.config import AgentConfig, get_default_config
from whiskey_agent.ingestion.judge import DedupJudge
from whiskey_agent.ingestion.orchestrator import IngestionResult, ingest_menu

console = Console()
ingest_app = typer.Typer(help="Ingestion pipeline commands")

API_KEY_ENV_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def load_menu(path: Path, source_type: SourceType | None = None) -> ExtractedMenu:
    """
    Load an extracted menu from a JSON file.

    The file holds either a full menu object or a bare list of entries.
    """
    data = json.loads(path.read_text())
    if isinstance(data, list):
        data = {"whiskeys": data}
    menu = ExtractedMenu.model_validate(data)
    if source_type is not None:
        menu = menu.model_copy(update={"source_type": source_type})
    return menu


def resolve_db_path() -> str | None:
    """
    Database path for CLI commands.

    DATABASE_URL wins; otherwise the configured ``global.database_path``.
    """
    if os.environ.get("DATABASE_URL"):
        return None
    return get_default_config().global_config.database_path


def build_judge(config: AgentConfig) -> DedupJudge | None:
    """Create the configured judge, or None when disabled or missing a key."""
    from whiskey_agent.services.ai.client import get_judge

    if not config.judge.enabled:
        return None

    env_var = API_KEY_ENV_VARS.get(config.judge.provider)
    api_key = os.environ.get(env_var, "") if env_var else ""
    if not api_key:
        rprint(
            f"[yellow]Warning:[/yellow] Judge enabled but {env_var or 'API key'} is not set; "
            "running without judge"
        )
        return None

    return get_judge(
        config.judge.provider,
        api_key=api_key,
        model=config.judge.model,
        timeout=config.judge.timeout_seconds,
    )


@ingest_app.command("run")
def run_ingestion(
    bar: Optional[str] = typer.Option(
        None, "--bar", "-b", help="Bar name (defaults to the menu's bar_name)"
    ),
    file: Path = typer.Option(..., "--file", "-f", help="Extracted menu JSON file"),
    source_type: Optional[SourceType] = typer.Option(
        None, "--source-type", "-t", help="Override the menu's source type"
    ),
    city: Optional[str] = typer.Option(None, "--city", help="City recorded for a new bar"),
    no_judge: bool = typer.Option(False, "--no-judge", help="Skip the semantic judge tier"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Resolve against an empty in-memory catalog; write nothing"
    ),
) -> None:
    """
    Ingest an extracted menu for one bar.

    Examples:
        whiskey-agent ingest run --bar "Multnomah Whiskey Library" --file menu.json
        whiskey-agent ingest run -f menu.json --source-type vision --no-judge
    """
    if not file.exists():
        rprint(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)

    try:
        menu = load_menu(file, source_type)
    except (json.JSONDecodeError, ValidationError) as e:
        rprint(f"[red]Error:[/red] Invalid menu file: {e}")
        raise typer.Exit(1)

    bar_name = bar or menu.bar_name
    if not bar_name:
        rprint("[red]Error:[/red] No bar given and the menu has no bar_name")
        raise typer.Exit(1)

    config = get_default_config()
    judge = None if no_judge else build_judge(config)

    rprint(f"\n[bold]Ingesting menu for bar:[/bold] {bar_name}")
    rprint(f"  Entries: {len(menu.whiskeys)}")
    rprint(f"  Source type: {menu.source_type.value}")
    rprint(f"  Judge: {'on' if judge else 'off'}")

    if dry_run:
        from whiskey_agent.core.schema_canonical import Bar

        rprint("\n[dim]Dry run: in-memory catalog[/dim]\n")
        catalog = InMemoryCatalog()
        result = ingest_menu(catalog, Bar(name=bar_name).id, menu, judge=judge, config=config)
        _display_result(result)
        return

    from whiskey_agent.db.engine import get_session, init_db
    from whiskey_agent.db.repositories import BarRepository

    db_path = resolve_db_path()
    init_db(db_path)
    with get_session(db_path) as session:
        bar_record = BarRepository(session).get_or_create(bar_name, city=city)
        session.commit()

        with console.status("[bold blue]Resolving...[/bold blue]"):
            result = ingest_menu(
                SqlCatalog(session), bar_record.id, menu, judge=judge, config=config
            )

    _display_result(result)
    if result.failed:
        raise typer.Exit(1)


def _display_result(result: IngestionResult) -> None:
    """Display an ingestion summary in a formatted table."""
    table = Table(title=f"Job {result.job_id}")
    table.add_column("Outcome")
    table.add_column("Count", justify="right")
    table.add_row("[green]Created[/green]", str(result.created))
    table.add_row("[blue]Updated[/blue]", str(result.updated))
    table.add_row("[yellow]Skipped[/yellow]", str(result.skipped))
    table.add_row("[red]Failed[/red]", str(result.failed))
    console.print(table)

    if result.duration_seconds is not None:
        rprint(f"  Duration: {result.duration_seconds:.1f}s")

    if result.failures:
        rprint(f"\n[bold red]Problems ({len(result.failures)}):[/bold red]")
        for failure in result.failures[:10]:  # Show first 10
            rprint(f"  • #{failure.index} {failure.name!r} ({failure.kind}): {failure.reason}")
        if len(result.failures) > 10:
            rprint(f"  ... and {len(result.failures) - 10} more")
