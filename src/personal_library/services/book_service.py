import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.exceptions.base import BadRequestError, NotFoundError
from personal_library.models.enums import OwnershipStatus
from personal_library.repositories.book_repository import BookRepository, SORT_FIELDS
from personal_library.schemas import BookDetailsDto, BookDto, PaginatedResponse
from personal_library.validators.dto_validators import CREATE_BOOK_VALIDATOR, UPDATE_BOOK_VALIDATOR
from .base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MAX_PAGE = 2**31 - 1


def normalize_page_request(
    page: int,
    page_size: int,
    sort_by: str | None,
    sort_direction: str | None,
) -> tuple[int, int, str, str]:
    """
    Clamp paging arguments into their accepted ranges:
      - page < 1 -> 1, page > MAX_PAGE -> MAX_PAGE (keeps the OFFSET in range)
      - page_size < 1 -> 10, page_size > 100 -> 100
      - sort_by is case-insensitive; unknown fields fall back to "title"
      - sort_direction other than asc/desc falls back to "asc"
    """
    if page < 1:
        page = 1
    elif page > MAX_PAGE:
        page = MAX_PAGE
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    elif page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE

    sort_by = (sort_by or "").lower()
    if sort_by not in SORT_FIELDS:
        sort_by = "title"

    sort_direction = (sort_direction or "").lower()
    if sort_direction not in ("asc", "desc"):
        sort_direction = "asc"

    return page, page_size, sort_by, sort_direction


def _book_fields(dto: BookDto) -> dict:
    return {
        "title": dto.title,
        "author": dto.author,
        "description": dto.description,
        "notes": dto.notes,
        "isbn": dto.isbn,
        "published_year": dto.published_year,
        "page_count": dto.page_count,
        "ownership_status": OwnershipStatus(dto.ownership_status),
    }


class BookService(BaseService):

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.books = BookRepository(db)

    async def list_books(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        sort_by: str | None = "title",
        sort_direction: str | None = "asc",
    ) -> PaginatedResponse[BookDetailsDto]:
        page, page_size, sort_by, sort_direction = normalize_page_request(
            page, page_size, sort_by, sort_direction
        )
        books, total = await self.books.list_paginated(page, page_size, sort_by, sort_direction)
        return PaginatedResponse[BookDetailsDto](
            items=[BookDetailsDto.from_book(b) for b in books],
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def get_book(self, book_id: UUID) -> BookDetailsDto:
        book = await self.books.get_details(book_id)
        if book is None:
            raise NotFoundError(f"Book with ID {book_id} not found")
        return BookDetailsDto.from_book(book)

    async def create_book(self, dto: BookDto) -> BookDetailsDto:
        CREATE_BOOK_VALIDATOR.validate_or_raise(dto)

        book = await self.books.create(**_book_fields(dto))
        await self.commit("Book")

        logger.info("book.create.success", extra={"book_id": str(book.id)})
        return await self.get_book(book.id)

    async def update_book(self, book_id: UUID, dto: BookDto) -> None:
        UPDATE_BOOK_VALIDATOR.validate_or_raise(dto)

        if dto.id != book_id:
            logger.info(
                "book.update.id_mismatch",
                extra={"route_id": str(book_id), "body_id": str(dto.id)},
            )
            raise BadRequestError("Id in request body must match route parameter")

        if not await self.books.exists(book_id):
            raise NotFoundError(f"Book with ID {book_id} not found")

        await self.books.update(book_id, **_book_fields(dto))
        await self.commit("Book")
        logger.info("book.update.success", extra={"book_id": str(book_id)})

    async def delete_book(self, book_id: UUID) -> None:
        deleted = await self.books.delete(book_id)
        if not deleted:
            raise NotFoundError(f"Book with ID {book_id} not found")
        await self.commit("Book")
        logger.info("book.delete.success", extra={"book_id": str(book_id)})
