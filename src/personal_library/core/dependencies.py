from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.database.session import get_async_session
from personal_library.services import BookService, LoanService, RatingService, ReadingStatusService


# One service per request, sharing the request's session (unit of work).

async def get_book_service(db: AsyncSession = Depends(get_async_session)) -> BookService:
    return BookService(db)


async def get_loan_service(db: AsyncSession = Depends(get_async_session)) -> LoanService:
    return LoanService(db)


async def get_rating_service(db: AsyncSession = Depends(get_async_session)) -> RatingService:
    return RatingService(db)


async def get_reading_status_service(
    db: AsyncSession = Depends(get_async_session),
) -> ReadingStatusService:
    return ReadingStatusService(db)
