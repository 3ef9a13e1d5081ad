"""Whiskey Agent CLI using Typer."""

import logging
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from whiskey_agent.cli.ingest import ingest_app, resolve_db_path

# Load .env file from current directory or project root
_env_paths = [
    Path.cwd() / ".env",
    Path(__file__).parent.parent.parent / ".env",
]
for _env_path in _env_paths:
    if _env_path.exists():
        load_dotenv(_env_path)
        break

__version__ = "0.1.0"

console = Console()

app = typer.Typer(
    name="whiskey-agent",
    help="Whiskey Agent - identity resolution for whiskey names from menus, photos and reviews",
    add_completion=False,
)
app.add_typer(ingest_app, name="ingest")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_ai_config() -> None:
    """Check and display judge configuration status."""
    from whiskey_agent.ingestion.config import get_default_config

    judge = get_default_config().judge
    anthropic_key = os.environ.get("ANTHROPIC_API_KEY", "")
    openai_key = os.environ.get("OPENAI_API_KEY", "")

    if not judge.enabled:
        typer.echo("  Judge: Disabled (cascade ends at the token tier)")
    elif judge.provider == "anthropic" and anthropic_key:
        typer.echo("  Judge: Anthropic (configured)")
    elif judge.provider == "openai" and openai_key:
        typer.echo("  Judge: OpenAI (configured)")
    else:
        typer.echo(f"  Judge: Enabled for {judge.provider} but no API key found")
        typer.echo("  Tip: Set ANTHROPIC_API_KEY or OPENAI_API_KEY in .env file")


@app.command()
def init_db(
    migrate: bool = typer.Option(
        False, "--migrate", "-m", help="Apply Alembic migrations instead of create_all"
    ),
) -> None:
    """Initialize the database (create tables)."""
    from whiskey_agent.db.engine import init_db as db_init
    from whiskey_agent.db.engine import run_migrations

    typer.echo("Initializing database...")
    if migrate:
        run_migrations(resolve_db_path())
    else:
        db_init(resolve_db_path())
    typer.echo("Database initialized successfully!")


@app.command()
def version() -> None:
    """Show the Whiskey Agent version."""
    typer.echo(f"Whiskey Agent v{__version__}")


@app.command()
def check_config() -> None:
    """Check the current configuration status."""
    from whiskey_agent.db.engine import get_database_url
    from whiskey_agent.ingestion.config import CONFIG_ENV_VAR, get_default_config

    typer.echo("Whiskey Agent Configuration")
    typer.echo("=" * 40)

    # Check .env file
    env_found = False
    for _env_path in _env_paths:
        if _env_path.exists():
            typer.echo(f"  .env file: {_env_path}")
            env_found = True
            break
    if not env_found:
        typer.echo("  .env file: Not found")

    try:
        config = get_default_config()
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"  Config: Invalid ({e})", err=True)
        raise typer.Exit(1)

    if config.config_path:
        typer.echo(f"  Config file: {config.config_path}")
    else:
        typer.echo(f"  Config file: Not found, using defaults (set {CONFIG_ENV_VAR})")

    res = config.resolution
    typer.echo(
        f"  Thresholds: fuzzy={res.fuzzy_threshold} token={res.token_threshold} "
        f"judge floors={res.judge_edit_floor}/{res.judge_token_floor}"
    )
    typer.echo(
        f"  Candidates: limit={res.candidate_limit} selection={res.selection.value} "
        f"numeric_guard={res.numeric_guard}"
    )

    _check_ai_config()

    typer.echo(f"  Database: {get_database_url(resolve_db_path())}")


@app.command()
def normalize(
    names: list[str] = typer.Argument(..., help="Raw whiskey names"),
) -> None:
    """Show the pick split and canonical key for each name."""
    from whiskey_agent.ingestion.normalizer import normalize_whiskey_name
    from whiskey_agent.ingestion.picks import parse_private_barrel

    table = Table(title="Normalized Names")
    table.add_column("Raw")
    table.add_column("Base Name")
    table.add_column("Pick")
    table.add_column("Canonical Key", style="bold")

    for name in names:
        parsed = parse_private_barrel(name)
        key = normalize_whiskey_name(parsed.base_name)
        table.add_row(name, parsed.base_name, parsed.pick_info or "-", key or "[red](empty)[/red]")

    console.print(table)


@app.command()
def compare(
    name_a: str = typer.Argument(..., help="First whiskey name"),
    name_b: str = typer.Argument(..., help="Second whiskey name"),
) -> None:
    """Show edit and token similarity between two names."""
    from whiskey_agent.ingestion.config import get_default_config
    from whiskey_agent.ingestion.normalizer import normalize_whiskey_name
    from whiskey_agent.ingestion.similarity import similarity_ratio, token_similarity

    res = get_default_config().resolution
    edit = similarity_ratio(name_a, name_b)
    token = token_similarity(name_a, name_b)

    typer.echo(f"  A: {normalize_whiskey_name(name_a)!r}")
    typer.echo(f"  B: {normalize_whiskey_name(name_b)!r}")
    typer.echo(f"  Edit similarity:  {edit:.3f} (fuzzy threshold {res.fuzzy_threshold})")
    typer.echo(f"  Token similarity: {token:.3f} (token threshold {res.token_threshold})")


if __name__ == "__main__":
    app()
