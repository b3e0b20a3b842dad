import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.exceptions.base import NotFoundError
from personal_library.models.enums import ReadingStatusValue
from personal_library.repositories import BookRepository, ReadingStatusRepository
from personal_library.schemas import ReadingStatusDto
from personal_library.validators.dto_validators import READING_STATUS_VALIDATOR
from .base_service import BaseService

logger = logging.getLogger(__name__)


class ReadingStatusService(BaseService):

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.books = BookRepository(db)
        self.statuses = ReadingStatusRepository(db)

    async def set_status(self, book_id: UUID, dto: ReadingStatusDto) -> ReadingStatusDto:
        READING_STATUS_VALIDATOR.validate_or_raise(dto)
        if not await self.books.exists(book_id):
            raise NotFoundError(f"Book with ID {book_id} not found")

        status = ReadingStatusValue(dto.status)
        existing = await self.statuses.get_by_book_id(book_id)
        if existing is None:
            saved = await self.statuses.create(book_id=book_id, status=status)
        else:
            saved = await self.statuses.update(existing.id, status=status)
        await self.commit("ReadingStatus")

        logger.info("reading_status.set.success", extra={"book_id": str(book_id), "status": status.value})
        return ReadingStatusDto(id=saved.id, status=status.value)

    async def delete_status(self, book_id: UUID) -> None:
        if not await self.books.exists(book_id):
            raise NotFoundError(f"Book with ID {book_id} not found")

        existing = await self.statuses.get_by_book_id(book_id)
        if existing is None:
            raise NotFoundError(f"Reading status for book with ID {book_id} not found")

        await self.statuses.delete(existing.id)
        await self.commit("ReadingStatus")
        logger.info("reading_status.delete.success", extra={"book_id": str(book_id)})
