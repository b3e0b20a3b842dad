"""
Centralized access to all database models of the library.

Importing this package registers every table on `Base.metadata`, which
`create_all` and the test fixtures rely on.

    from personal_library.models import Book, Loan, Rating, ReadingStatus
"""

from .enums import OwnershipStatus, ReadingStatusValue
from .book import Book
from .loan import Loan
from .rating import Rating
from .reading_status import ReadingStatus

__all__ = [
    "OwnershipStatus",
    "ReadingStatusValue",
    "Book",
    "Loan",
    "Rating",
    "ReadingStatus",
]
