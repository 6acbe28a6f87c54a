"""Book entity module.

This module contains all Book-related classes organized by responsibility:
- Book / BookCreate / BookUpdate: Stored entity, create input and mutable-field update
- BookTable: Database persistence model
- BookRepository: Data access layer
- validate_book: Payload validation for create and update requests
"""

from .entity import Book, BookCreate, BookUpdate
from .repository import BookRepository
from .table import BookTable
from .validation import ValidationMode, validate_book

__all__ = [
    "Book",
    "BookCreate",
    "BookUpdate",
    "BookTable",
    "BookRepository",
    "ValidationMode",
    "validate_book",
]
