"""
Repository layer.

    from personal_library.repositories import BookRepository, LoanRepository
"""

from .base_repository import BaseRepository
from .book_repository import BookRepository
from .loan_repository import LoanRepository
from .rating_repository import RatingRepository
from .reading_status_repository import ReadingStatusRepository

__all__ = [
    "BaseRepository",
    "BookRepository",
    "LoanRepository",
    "RatingRepository",
    "ReadingStatusRepository",
]
