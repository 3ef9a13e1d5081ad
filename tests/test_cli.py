"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from whiskey_agent.cli.ingest import load_menu
from whiskey_agent.cli.main import __version__, app
from whiskey_agent.core.enums import SourceType
from whiskey_agent.ingestion.config import reset_default_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_default_config():
    reset_default_config()
    yield
    reset_default_config()


@pytest.fixture
def menu_file(tmp_path: Path) -> Path:
    path = tmp_path / "menu.json"
    path.write_text(
        json.dumps(
            {
                "bar_name": "Pope House",
                "source_type": "text_scrape",
                "whiskeys": [
                    {"name": "Weller 12", "price": 14},
                    {"name": "WELLER 12"},
                    {"name": ""},
                ],
            }
        )
    )
    return path


class TestLoadMenu:
    """Tests for reading menu files."""

    def test_bare_list(self, tmp_path: Path) -> None:
        """Test a bare list of entries is wrapped into a menu."""
        path = tmp_path / "entries.json"
        path.write_text(json.dumps([{"name": "Weller 12"}]))

        menu = load_menu(path, SourceType.VISION)

        assert menu.whiskeys == [{"name": "Weller 12"}]
        assert menu.source_type == SourceType.VISION


class TestCommands:
    """Tests for top-level commands."""

    def test_version(self) -> None:
        """Test the version command."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_compare(self) -> None:
        """Test compare prints both canonical keys and scores."""
        result = runner.invoke(app, ["compare", "Lagavulin 16", "Lagavulin 8"])

        assert result.exit_code == 0
        assert "'lagavulin 16'" in result.output
        assert "'lagavulin 8'" in result.output
        assert "Edit similarity:  0.833" in result.output

    def test_normalize(self) -> None:
        """Test normalize shows the canonical key."""
        result = runner.invoke(app, ["normalize", "Weller 12 YO"])

        assert result.exit_code == 0
        assert "weller 12 year" in result.output


class TestIngestRun:
    """Tests for the ingest run command."""

    def test_dry_run(self, menu_file: Path) -> None:
        """Test a dry run resolves the menu without touching a database."""
        result = runner.invoke(app, ["ingest", "run", "--file", str(menu_file), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Pope House" in result.output
        assert "Created" in result.output
        assert "empty name" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing menu file exits with an error."""
        result = runner.invoke(app, ["ingest", "run", "--file", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test an unreadable menu file exits with an error."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(app, ["ingest", "run", "--file", str(path), "--dry-run"])

        assert result.exit_code == 1
        assert "Invalid menu file" in result.output

    def test_writes_to_database(
        self, menu_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a real run persists into the configured database."""
        from whiskey_agent.db.engine import get_session, reset_engine
        from whiskey_agent.db.repositories import BarRepository, WhiskeyRepository

        db_path = tmp_path / "catalog.db"
        monkeypatch.setenv("DATABASE_URL", str(db_path))
        reset_engine()
        try:
            result = runner.invoke(
                app, ["ingest", "run", "--file", str(menu_file), "--bar", "Pope House"]
            )

            assert result.exit_code == 0, result.output
            with get_session() as session:
                assert WhiskeyRepository(session).count() == 1
                assert BarRepository(session).get_by_name("Pope House") is not None
        finally:
            reset_engine()
