"""Book repository: the only code that reads or writes the ``books`` table."""

from typing import Any

from loguru import logger
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session, select

from books_api.core.outcomes import ConstraintViolation, NotFound, PersistenceUnavailable
from books_api.entities.book.entity import Book, BookCreate
from books_api.entities.book.table import BookTable

# Connection failures, statement timeouts and pool checkout timeouts
_UNAVAILABLE_ERRORS = (DBAPIError, PoolTimeoutError)


class BookRepository:
    """Data-access layer for books.

    Queries are composed with SQLModel expressions so user input is always
    sent as bound parameters. Every write runs in its own transaction and is
    rolled back on failure.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _unavailable(self, operation: str, error: Exception) -> PersistenceUnavailable:
        self._session.rollback()
        logger.bind(operation=operation, error_type=type(error).__name__).error(
            "Database operation failed: {}", error
        )
        return PersistenceUnavailable(message=f"Database unavailable during {operation}")

    def list_all(self) -> list[Book] | PersistenceUnavailable:
        try:
            rows = self._session.exec(select(BookTable).order_by(BookTable.title)).all()
        except _UNAVAILABLE_ERRORS as e:
            return self._unavailable("list_all", e)
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def get_by_isbn(self, isbn: str) -> Book | NotFound | PersistenceUnavailable:
        try:
            row = self._session.get(BookTable, isbn)
        except _UNAVAILABLE_ERRORS as e:
            return self._unavailable("get_by_isbn", e)
        if row is None:
            return NotFound(isbn=isbn)
        return Book.model_validate(row, from_attributes=True)

    def insert(self, book: BookCreate) -> Book | ConstraintViolation | PersistenceUnavailable:
        duplicate = ConstraintViolation(
            message=f"A book with isbn '{book.isbn}' already exists"
        )
        try:
            if self._session.get(BookTable, book.isbn) is not None:
                return duplicate
            row = BookTable(**book.model_dump())
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except IntegrityError:
            # Lost a race with a concurrent insert of the same isbn
            self._session.rollback()
            logger.info("Rejected duplicate isbn {}", book.isbn)
            return duplicate
        except _UNAVAILABLE_ERRORS as e:
            return self._unavailable("insert", e)

        logger.info("Created book {}", row.isbn)
        return Book.model_validate(row, from_attributes=True)

    def update(
        self, isbn: str, fields: dict[str, Any]
    ) -> Book | NotFound | PersistenceUnavailable:
        try:
            row = self._session.get(BookTable, isbn)
            if row is None:
                return NotFound(isbn=isbn)
            for name, value in fields.items():
                if name == "isbn":
                    continue
                setattr(row, name, value)
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except _UNAVAILABLE_ERRORS as e:
            return self._unavailable("update", e)

        logger.info("Updated book {} fields {}", isbn, sorted(fields))
        return Book.model_validate(row, from_attributes=True)

    def delete_by_isbn(self, isbn: str) -> int | PersistenceUnavailable:
        try:
            row = self._session.get(BookTable, isbn)
            if row is None:
                return 0
            self._session.delete(row)
            self._session.commit()
        except _UNAVAILABLE_ERRORS as e:
            return self._unavailable("delete_by_isbn", e)

        logger.info("Deleted book {}", isbn)
        return 1
