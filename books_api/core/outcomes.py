"""Outcome values returned by the validator and the persistence gateway.

Callers branch on these with ``isinstance`` instead of catching exceptions;
the books router is the only place they are turned into HTTP responses.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NotFound:
    """No row matched the requested isbn."""

    isbn: str

    @property
    def message(self) -> str:
        return f"There is no book with an isbn of '{self.isbn}'"


@dataclass(frozen=True)
class ValidationFailure:
    """A payload violated one or more constraints."""

    errors: list[str]


@dataclass(frozen=True)
class ConstraintViolation:
    """The database rejected a write, e.g. a duplicate isbn."""

    message: str


@dataclass(frozen=True)
class PersistenceUnavailable:
    """The database could not be reached or did not answer in time."""

    message: str
