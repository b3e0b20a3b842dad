from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from personal_library.core.dependencies import get_loan_service
from personal_library.schemas import LoanDto, LoanResponse
from personal_library.services import LoanService

router = APIRouter(tags=["loans"])


@router.get("/loans", response_model=list[LoanResponse])
async def list_active_loans(service: LoanService = Depends(get_loan_service)):
    return await service.list_active_loans()


@router.get("/books/{book_id}/loans", response_model=list[LoanResponse])
async def loan_history(book_id: UUID, service: LoanService = Depends(get_loan_service)):
    return await service.loan_history(book_id)


@router.post("/books/{book_id}/loan", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
async def lend_book(book_id: UUID, dto: LoanDto, service: LoanService = Depends(get_loan_service)):
    return await service.lend_book(book_id, dto)


@router.delete("/books/{book_id}/loan", status_code=status.HTTP_204_NO_CONTENT)
async def return_book(book_id: UUID, service: LoanService = Depends(get_loan_service)):
    await service.return_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
