import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.exceptions.base import BusinessRuleError, NotFoundError
from personal_library.repositories import BookRepository, LoanRepository
from personal_library.schemas import LoanDto, LoanResponse
from personal_library.validators.dto_validators import LOAN_VALIDATOR
from .base_service import BaseService

logger = logging.getLogger(__name__)


class LoanService(BaseService):

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.books = BookRepository(db)
        self.loans = LoanRepository(db)

    async def _require_book(self, book_id: UUID) -> None:
        if not await self.books.exists(book_id):
            raise NotFoundError(f"Book with ID {book_id} not found")

    async def list_active_loans(self) -> list[LoanResponse]:
        loans = await self.loans.list_active()
        return [LoanResponse.from_loan(loan, include_book=True) for loan in loans]

    async def loan_history(self, book_id: UUID) -> list[LoanResponse]:
        await self._require_book(book_id)
        loans = await self.loans.list_for_book(book_id)
        return [LoanResponse.from_loan(loan) for loan in loans]

    async def lend_book(self, book_id: UUID, dto: LoanDto) -> LoanResponse:
        """
        Lend a book to someone. A book can only be out to one borrower at a time.
        """
        LOAN_VALIDATOR.validate_or_raise(dto)
        await self._require_book(book_id)

        active = await self.loans.get_active_for_book(book_id)
        if active is not None:
            logger.info(
                "loan.create.already_loaned",
                extra={"book_id": str(book_id), "loan_id": str(active.id)},
            )
            raise BusinessRuleError(
                f"Book with ID {book_id} is already loaned to {active.borrowed_to}"
            )

        loan = await self.loans.create(
            book_id=book_id,
            borrowed_to=dto.borrowed_to,
            loan_date=datetime.now(timezone.utc),
            is_returned=False,
        )
        await self.commit("Loan")

        logger.info("loan.create.success", extra={"book_id": str(book_id), "loan_id": str(loan.id)})
        return LoanResponse.from_loan(loan)

    async def return_book(self, book_id: UUID) -> None:
        active = await self.loans.get_active_for_book(book_id)
        if active is None:
            raise NotFoundError(f"No active loan found for book with ID {book_id}")

        await self.loans.mark_returned(active, datetime.now(timezone.utc))
        await self.commit("Loan")
        logger.info("loan.return.success", extra={"book_id": str(book_id), "loan_id": str(active.id)})
