"""Entity: Book."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

ISBN_MIN_LENGTH = 10
URL_PATTERN = r"^https?://\S+$"
# Largest value a 32-bit INTEGER column holds
INTEGER_COLUMN_MAX = 2**31 - 1

# Strict types: JSON strings are never coerced to numbers or the reverse
Isbn = Annotated[str, Field(strict=True, min_length=ISBN_MIN_LENGTH)]
Url = Annotated[str, Field(strict=True, pattern=URL_PATTERN)]
Text = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1), Field(strict=True)
]
PageCount = Annotated[int, Field(strict=True, ge=0, le=INTEGER_COLUMN_MAX)]
Year = Annotated[int, Field(strict=True, ge=0, le=9999)]


class Book(BaseModel):
    """Book entity representing one row of the ``books`` table.

    This is the domain model returned by the repository and rendered by the
    API. It carries no write rules: rows already stored are read back as they
    are, whoever wrote them.
    """

    model_config = ConfigDict(from_attributes=True)

    isbn: str = Field(description="ISBN, primary key")
    amazon_url: str = Field(description="Amazon product URL")
    author: str = Field(description="Author")
    language: str = Field(description="Language")
    pages: int = Field(description="Number of pages")
    publisher: str = Field(description="Publisher")
    title: str = Field(description="Title")
    year: int = Field(description="Publication year")


class BookCreate(BaseModel):
    """A new book as accepted by a create request.

    Field constraints are the create-time validation rules.
    """

    model_config = ConfigDict(extra="forbid")

    isbn: Isbn
    amazon_url: Url
    author: Text
    language: Text
    pages: PageCount
    publisher: Text
    title: Text
    year: Year


class BookUpdate(BaseModel):
    """Mutable book fields accepted by an update.

    ``isbn`` is deliberately absent: it identifies the row and never changes.
    """

    model_config = ConfigDict(extra="forbid")

    amazon_url: Url | None = None
    author: Text | None = None
    language: Text | None = None
    pages: PageCount | None = None
    publisher: Text | None = None
    title: Text | None = None
    year: Year | None = None

    def changes(self) -> dict[str, str | int]:
        """Return only the fields supplied by the caller."""
        return self.model_dump(exclude_unset=True)
