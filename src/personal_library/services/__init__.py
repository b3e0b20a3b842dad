from .book_service import BookService
from .loan_service import LoanService
from .rating_service import RatingService
from .reading_status_service import ReadingStatusService

__all__ = [
    "BookService",
    "LoanService",
    "RatingService",
    "ReadingStatusService",
]
