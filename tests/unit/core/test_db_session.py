"""Tests for the database session service and table management."""

import pytest
from sqlalchemy import inspect
from sqlmodel import select

from books_api.core.services import DbManageService, DbSessionService
from books_api.entities.book import BookTable
from books_api.runtime.config.config_data import AppConfig, ConfigData, DatabaseConfig


@pytest.fixture
def memory_config() -> ConfigData:
    return ConfigData(
        app=AppConfig(environment="test"),
        database=DatabaseConfig(
            url="sqlite://", environment_mode="test", statement_timeout_ms=5000
        ),
    )


@pytest.fixture
def db_service(memory_config: ConfigData):
    service = DbSessionService(memory_config)
    DbManageService(service.engine).create_all()
    yield service
    service.dispose()


class TestDbSessionService:
    def test_health_check(self, db_service: DbSessionService):
        assert db_service.health_check() is True

    def test_session_scope_commits(self, db_service: DbSessionService, sample_book_data):
        with db_service.session_scope() as session:
            session.add(BookTable(**sample_book_data))

        with db_service.session_scope() as session:
            row = session.exec(select(BookTable)).one()
            assert row.isbn == sample_book_data["isbn"]

    def test_session_scope_rolls_back_on_error(
        self, db_service: DbSessionService, sample_book_data
    ):
        with pytest.raises(RuntimeError):
            with db_service.session_scope() as session:
                session.add(BookTable(**sample_book_data))
                session.flush()
                raise RuntimeError("boom")

        with db_service.session_scope() as session:
            assert session.exec(select(BookTable)).all() == []

    def test_pool_status(self, db_service: DbSessionService):
        status = db_service.get_pool_status()

        assert set(status) == {"size", "checked_in", "checked_out", "overflow"}

    def test_sqlite_connect_args(self, db_service: DbSessionService, memory_config):
        connect_args = db_service._get_connect_args(memory_config)

        assert connect_args == {"check_same_thread": False, "timeout": 5}

    def test_postgresql_connect_args_carry_timeouts(self, db_service: DbSessionService):
        pg_config = ConfigData(
            app=AppConfig(environment="production"),
            database=DatabaseConfig(
                url="postgresql://books:secret@db:5432/books",
                connect_timeout=3,
                statement_timeout_ms=1500,
            ),
        )

        connect_args = db_service._get_connect_args(pg_config)

        assert connect_args["connect_timeout"] == 3
        assert connect_args["options"] == "-c statement_timeout=1500"
        assert connect_args["application_name"] == "production_books_api"


class TestDbManageService:
    def test_create_and_drop(self, memory_config: ConfigData):
        service = DbSessionService(memory_config)
        manager = DbManageService(service.engine)
        try:
            manager.create_all()
            assert "books" in inspect(service.engine).get_table_names()

            manager.drop_all()
            assert "books" not in inspect(service.engine).get_table_names()
        finally:
            service.dispose()
