import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.exceptions.base import NotFoundError
from personal_library.repositories import BookRepository, RatingRepository
from personal_library.schemas import RatingDto
from personal_library.validators.dto_validators import RATING_VALIDATOR
from .base_service import BaseService

logger = logging.getLogger(__name__)


class RatingService(BaseService):

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.books = BookRepository(db)
        self.ratings = RatingRepository(db)

    async def rate_book(self, book_id: UUID, dto: RatingDto) -> RatingDto:
        """Create the book's rating, or overwrite score and notes if it already has one."""
        RATING_VALIDATOR.validate_or_raise(dto)
        if not await self.books.exists(book_id):
            raise NotFoundError(f"Book with ID {book_id} not found")

        existing = await self.ratings.get_by_book_id(book_id)
        if existing is None:
            rating = await self.ratings.create(book_id=book_id, score=dto.score, notes=dto.notes)
            event = "rating.create.success"
        else:
            rating = await self.ratings.update(existing.id, score=dto.score, notes=dto.notes)
            event = "rating.update.success"
        await self.commit("Rating")

        logger.info(event, extra={"book_id": str(book_id), "score": rating.score})
        return RatingDto(id=rating.id, score=rating.score, notes=rating.notes)

    async def delete_rating(self, book_id: UUID) -> None:
        if not await self.books.exists(book_id):
            raise NotFoundError(f"Book with ID {book_id} not found")

        existing = await self.ratings.get_by_book_id(book_id)
        if existing is None:
            raise NotFoundError(f"Rating for book with ID {book_id} not found")

        await self.ratings.delete(existing.id)
        await self.commit("Rating")
        logger.info("rating.delete.success", extra={"book_id": str(book_id)})
