"""Request payload validation for books.

``validate_book`` runs a JSON payload through the pydantic models in
``entity`` and turns every reported problem into a readable sentence. All
violations are collected; nothing short-circuits on the first error.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from books_api.core.outcomes import ValidationFailure
from books_api.entities.book.entity import BookCreate, BookUpdate


class ValidationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


_MODELS: dict[ValidationMode, type[BaseModel]] = {
    ValidationMode.CREATE: BookCreate,
    ValidationMode.UPDATE: BookUpdate,
}


def _describe(error: dict[str, Any], mode: ValidationMode) -> str:
    """Render one pydantic error as a sentence about the offending field."""
    field = ".".join(str(part) for part in error["loc"]) or "body"
    ctx = error.get("ctx") or {}
    kind = error["type"]

    if kind == "missing":
        return f"{field} is required"
    if kind == "extra_forbidden":
        if mode is ValidationMode.UPDATE and field == "isbn":
            return "isbn cannot be updated"
        return f"{field} is not an allowed field"
    if kind == "string_type":
        return f"{field} must be a string"
    if kind == "int_type":
        return f"{field} must be an integer"
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{field} must not be empty"
        return f"{field} must be at least {ctx['min_length']} characters"
    if kind == "greater_than_equal":
        return f"{field} must be greater than or equal to {ctx['ge']}"
    if kind == "less_than_equal":
        return f"{field} must be less than or equal to {ctx['le']}"
    if kind == "string_pattern_mismatch":
        return f"{field} must be an http or https URL"
    return f"{field}: {error['msg']}"


def _field_position(model: type[BaseModel], field: str) -> int:
    names = list(model.model_fields)
    return names.index(field) if field in names else len(names)


def validate_book(
    payload: Any, mode: ValidationMode
) -> BookCreate | BookUpdate | ValidationFailure:
    """Validate a create or update payload.

    Returns the parsed ``BookCreate`` (create) or ``BookUpdate`` (update), or a
    ``ValidationFailure`` listing one message per violated constraint in
    field order.
    """
    if not isinstance(payload, dict):
        return ValidationFailure(errors=["Request body must be a JSON object"])

    model = _MODELS[mode]
    problems: list[tuple[str, str]] = []

    if mode is ValidationMode.UPDATE:
        supplied = [key for key in payload if key in BookUpdate.model_fields]
        if not supplied and "isbn" not in payload:
            problems.append(
                ("", "At least one of "
                 + ", ".join(BookUpdate.model_fields)
                 + " must be provided")
            )
        # Columns are NOT NULL, so an explicit null cannot overwrite a value
        problems.extend(
            (key, f"{key} must not be null")
            for key in supplied
            if payload[key] is None
        )

    try:
        parsed = model.model_validate(payload)
    except ValidationError as e:
        problems.extend(
            (str(error["loc"][0]) if error["loc"] else "", _describe(error, mode))
            for error in e.errors()
        )
        parsed = None

    if problems:
        problems.sort(key=lambda item: _field_position(model, item[0]))
        return ValidationFailure(errors=[message for _, message in problems])

    return parsed
