from datetime import datetime
from uuid import UUID

from sqlalchemy import false, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from personal_library.models import Loan
from .base_repository import BaseRepository


class LoanRepository(BaseRepository[Loan]):

    def __init__(self, db: AsyncSession):
        super().__init__(Loan, db)

    async def list_active(self) -> list[Loan]:
        """All loans not yet returned, oldest first, with their book loaded."""
        result = await self.db.execute(
            select(Loan)
            .where(Loan.is_returned == false())
            .options(selectinload(Loan.book))
            .order_by(Loan.loan_date)
        )
        return list(result.scalars().all())

    async def list_for_book(self, book_id: UUID) -> list[Loan]:
        """Loan history of one book, newest first."""
        result = await self.db.execute(
            select(Loan)
            .where(Loan.book_id == book_id)
            .order_by(Loan.loan_date.desc())
        )
        return list(result.scalars().all())

    async def get_active_for_book(self, book_id: UUID) -> Loan | None:
        result = await self.db.execute(
            select(Loan).where(Loan.book_id == book_id, Loan.is_returned == false())
        )
        return result.scalar_one_or_none()

    async def mark_returned(self, loan: Loan, returned_at: datetime) -> Loan | None:
        return await self.update(loan.id, is_returned=True, returned_date=returned_at)
