from uuid import UUID
import logging

from sqlalchemy import Select, and_, false, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from personal_library.models import Book, Loan, Rating, ReadingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

SORT_FIELDS = ("title", "author", "score", "ownershipstatus", "readingstatus", "loanee")

_SORT_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "score": Rating.score,
    "ownershipstatus": Book.ownership_status,
    "readingstatus": ReadingStatus.status,
    "loanee": Loan.borrowed_to,
}


class BookRepository(BaseRepository[Book]):
    """
    Book-specific queries: the flattened "details" reads and the sorted, paginated listing.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    @staticmethod
    def _with_details(stmt: Select) -> Select:
        # Async sessions cannot lazy-load; everything BookDetailsDto reads is loaded up front.
        return stmt.options(
            selectinload(Book.rating),
            selectinload(Book.reading_status),
            selectinload(Book.active_loan),
        ).execution_options(populate_existing=True)

    async def get_details(self, book_id: UUID) -> Book | None:
        result = await self.db.execute(
            self._with_details(select(Book).where(Book.id == book_id))
        )
        return result.scalar_one_or_none()

    async def list_paginated(
        self,
        page: int,
        page_size: int,
        sort_by: str,
        sort_direction: str,
    ) -> tuple[list[Book], int]:
        """
        Return one page of books and the total number of books.

        Arguments are expected to be normalized already (see BookService). Sorting on
        score, reading status or loanee goes through outer joins, so books without a
        rating/status/active loan sort first ascending and last descending.
        """
        column = _SORT_COLUMNS.get(sort_by, Book.title)
        if sort_direction == "desc":
            ordering = column.desc().nulls_last()
        else:
            ordering = column.asc().nulls_first()

        stmt = (
            select(Book)
            .outerjoin(Rating, Rating.book_id == Book.id)
            .outerjoin(ReadingStatus, ReadingStatus.book_id == Book.id)
            .outerjoin(Loan, and_(Loan.book_id == Book.id, Loan.is_returned == false()))
            .order_by(ordering, Book.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )

        result = await self.db.execute(self._with_details(stmt))
        books = list(result.scalars().all())

        total = await self.count()

        logger.debug(
            "repo.books.page",
            extra={
                "page": page,
                "page_size": page_size,
                "sort_by": sort_by,
                "sort_direction": sort_direction,
                "returned": len(books),
                "total": total,
            },
        )
        return books, total
