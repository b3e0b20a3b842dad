from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.models import ReadingStatus
from .base_repository import BaseRepository


class ReadingStatusRepository(BaseRepository[ReadingStatus]):

    def __init__(self, db: AsyncSession):
        super().__init__(ReadingStatus, db)

    async def get_by_book_id(self, book_id: UUID) -> ReadingStatus | None:
        return await self.find_by_field("book_id", book_id)
