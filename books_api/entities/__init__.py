"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model with validation rules
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookCreate, BookRepository, BookTable, BookUpdate

__all__ = ["Book", "BookCreate", "BookUpdate", "BookTable", "BookRepository"]
