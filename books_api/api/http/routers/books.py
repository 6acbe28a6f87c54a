"""Book API router with CRUD operations.

Validation and persistence return outcome values; this module is where they
become status codes and JSON bodies.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel
from starlette.responses import JSONResponse

from books_api.api.http.deps import get_book_repository
from books_api.core.outcomes import (
    ConstraintViolation,
    NotFound,
    PersistenceUnavailable,
    ValidationFailure,
)
from books_api.entities.book import Book, BookRepository, ValidationMode, validate_book

router = APIRouter()


class BookResponse(BaseModel):
    book: Book


class BookListResponse(BaseModel):
    books: list[Book]


class MessageResponse(BaseModel):
    message: str


def _errors(status_code: int, errors: list[str]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": errors})


def _raise_for(outcome: NotFound | PersistenceUnavailable) -> None:
    if isinstance(outcome, NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=outcome.message)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=outcome.message
    )


@router.get("", response_model=BookListResponse)
def list_books(repository: BookRepository = Depends(get_book_repository)) -> BookListResponse:
    """List all books."""
    books = repository.list_all()
    if isinstance(books, PersistenceUnavailable):
        _raise_for(books)
    return BookListResponse(books=books)


@router.get("/{isbn}", response_model=BookResponse)
def get_book(
    isbn: str,
    repository: BookRepository = Depends(get_book_repository),
) -> BookResponse:
    """Get a book by isbn."""
    book = repository.get_by_isbn(isbn)
    if isinstance(book, (NotFound, PersistenceUnavailable)):
        _raise_for(book)
    return BookResponse(book=book)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid book payload"},
        status.HTTP_409_CONFLICT: {"description": "isbn already exists"},
    },
)
def create_book(
    payload: Any = Body(default=None),
    repository: BookRepository = Depends(get_book_repository),
) -> BookResponse | JSONResponse:
    """Create a new book."""
    book = validate_book(payload, ValidationMode.CREATE)
    if isinstance(book, ValidationFailure):
        return _errors(status.HTTP_400_BAD_REQUEST, book.errors)

    created = repository.insert(book)
    if isinstance(created, ConstraintViolation):
        return _errors(status.HTTP_409_CONFLICT, [created.message])
    if isinstance(created, PersistenceUnavailable):
        _raise_for(created)
    return BookResponse(book=created)


@router.put(
    "/{isbn}",
    response_model=BookResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid book payload"},
        status.HTTP_404_NOT_FOUND: {"description": "Book not found"},
    },
)
def update_book(
    isbn: str,
    payload: Any = Body(default=None),
    repository: BookRepository = Depends(get_book_repository),
) -> BookResponse | JSONResponse:
    """Replace the mutable fields of a book."""
    changes = validate_book(payload, ValidationMode.UPDATE)
    if isinstance(changes, ValidationFailure):
        return _errors(status.HTTP_400_BAD_REQUEST, changes.errors)

    updated = repository.update(isbn, changes.changes())
    if isinstance(updated, (NotFound, PersistenceUnavailable)):
        _raise_for(updated)
    return BookResponse(book=updated)


@router.delete(
    "/{isbn}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Book not found"}},
)
def delete_book(
    isbn: str,
    repository: BookRepository = Depends(get_book_repository),
) -> MessageResponse:
    """Delete a book."""
    removed = repository.delete_by_isbn(isbn)
    if isinstance(removed, PersistenceUnavailable):
        _raise_for(removed)
    if not removed:
        _raise_for(NotFound(isbn=isbn))
    return MessageResponse(message="Book deleted")
