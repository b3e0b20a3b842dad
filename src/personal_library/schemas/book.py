from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from .base import CamelModel, Int32
from personal_library.models.enums import OwnershipStatus, ReadingStatusValue

if TYPE_CHECKING:
    from personal_library.models import Book


class BookDto(CamelModel):
    """
    Request body for creating and updating a book.

    Fields are deliberately loose (plain strings, optional numbers): length, range and
    enum membership are enforced by the rule tables in validators/dto_validators.py so
    every violation is reported together, keyed by field.
    """
    id: uuid.UUID | None = None
    title: str | None = ""
    author: str | None = ""
    description: str | None = None
    notes: str | None = None
    isbn: str | None = None
    published_year: Int32 | None = None
    page_count: Int32 | None = None
    ownership_status: str | None = OwnershipStatus.WANT_TO_BUY.value


class BookSummary(CamelModel):
    id: uuid.UUID
    title: str
    author: str


class BookDetailsDto(CamelModel):
    """A book flattened together with its rating, reading status and active loan."""
    id: uuid.UUID
    title: str
    author: str
    description: str | None = None
    notes: str | None = None
    isbn: str | None = None
    published_year: int | None = None
    page_count: int | None = None
    ownership_status: OwnershipStatus
    score: int | None = None
    rating_notes: str | None = None
    reading_status: ReadingStatusValue | None = None
    loanee: str | None = None
    loan_date: datetime | None = None

    @classmethod
    def from_book(cls, book: Book) -> BookDetailsDto:
        # Relationships must already be loaded (see BookRepository._with_details).
        rating = book.rating
        status = book.reading_status
        loan = book.active_loan
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            description=book.description,
            notes=book.notes,
            isbn=book.isbn,
            published_year=book.published_year,
            page_count=book.page_count,
            ownership_status=book.ownership_status,
            score=rating.score if rating else None,
            rating_notes=rating.notes if rating else None,
            reading_status=status.status if status else None,
            loanee=loan.borrowed_to if loan else None,
            loan_date=loan.loan_date if loan else None,
        )
