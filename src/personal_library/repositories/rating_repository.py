from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.models import Rating
from .base_repository import BaseRepository


class RatingRepository(BaseRepository[Rating]):

    def __init__(self, db: AsyncSession):
        super().__init__(Rating, db)

    async def get_by_book_id(self, book_id: UUID) -> Rating | None:
        return await self.find_by_field("book_id", book_id)
