"""Books API.

A FastAPI service exposing CRUD endpoints for a relational ``books`` table,
with request validation, YAML-driven configuration and loguru logging.
"""

__version__ = "0.1.0"
