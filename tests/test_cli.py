"""Tests for the books-api command-line interface."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect
from typer.testing import CliRunner

from books_api.cli import app
from books_api.runtime.config.config_data import ConfigData, DatabaseConfig
from books_api.runtime.context import with_context

runner = CliRunner()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'books.db'}"


def test_init_db_creates_books_table(database_url: str):
    with with_context(ConfigData(database=DatabaseConfig(url=database_url))):
        result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 0
    assert "Books table is ready" in result.output
    engine = create_engine(database_url)
    try:
        assert "books" in inspect(engine).get_table_names()
    finally:
        engine.dispose()


def test_check_db_reports_reachable_database(database_url: str):
    with with_context(ConfigData(database=DatabaseConfig(url=database_url))):
        result = runner.invoke(app, ["check-db"])

    assert result.exit_code == 0
    assert "Database is reachable" in result.output


def test_check_db_fails_for_unreachable_database(tmp_path: Path):
    url = f"sqlite:///{tmp_path / 'missing' / 'books.db'}"
    with with_context(ConfigData(database=DatabaseConfig(url=url))):
        result = runner.invoke(app, ["check-db"])

    assert result.exit_code == 1
    assert "not reachable" in result.output
