from .base import CamelModel
from .book import BookDto, BookDetailsDto, BookSummary
from .pagination import PaginatedResponse
from .loan import LoanDto, LoanResponse
from .rating import RatingDto
from .reading_status import ReadingStatusDto
from .problem import ProblemResponse

__all__ = [
    "CamelModel",
    "BookDto",
    "BookDetailsDto",
    "BookSummary",
    "PaginatedResponse",
    "LoanDto",
    "LoanResponse",
    "RatingDto",
    "ReadingStatusDto",
    "ProblemResponse",
]
