from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from .base import CamelModel
from .book import BookSummary

if TYPE_CHECKING:
    from personal_library.models import Loan


class LoanDto(CamelModel):
    """Request body for lending a book. Only `borrowedTo` is read on create."""
    id: uuid.UUID | None = None
    borrowed_to: str | None = ""
    loan_date: datetime | None = None
    is_returned: bool | None = None
    returned_date: datetime | None = None


class LoanResponse(CamelModel):
    id: uuid.UUID
    book_id: uuid.UUID
    borrowed_to: str
    loan_date: datetime
    is_returned: bool
    returned_date: datetime | None = None
    book: BookSummary | None = None

    @classmethod
    def from_loan(cls, loan: Loan, *, include_book: bool = False) -> LoanResponse:
        book = None
        if include_book and loan.book is not None:
            book = BookSummary(id=loan.book.id, title=loan.book.title, author=loan.book.author)
        return cls(
            id=loan.id,
            book_id=loan.book_id,
            borrowed_to=loan.borrowed_to,
            loan_date=loan.loan_date,
            is_returned=loan.is_returned,
            returned_date=loan.returned_date,
            book=book,
        )
