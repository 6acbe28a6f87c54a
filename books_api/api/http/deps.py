"""Request-scoped dependencies."""

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from books_api.api.http.app_data import ApplicationDependencies
from books_api.entities.book import BookRepository


def get_database_service(request: Request):
    """Get the shared database service created at startup."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(request: Request) -> Iterator[Session]:
    """Open a session for the duration of one request."""
    session = get_database_service(request).get_session()
    try:
        yield session
    finally:
        session.close()


def get_book_repository(session: Session = Depends(get_db_session)) -> BookRepository:
    return BookRepository(session)
