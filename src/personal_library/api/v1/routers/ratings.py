from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from personal_library.core.dependencies import get_rating_service
from personal_library.schemas import RatingDto
from personal_library.services import RatingService

router = APIRouter(prefix="/books/{book_id}/rating", tags=["ratings"])


@router.post("", response_model=RatingDto)
async def rate_book(book_id: UUID, dto: RatingDto, service: RatingService = Depends(get_rating_service)):
    return await service.rate_book(book_id, dto)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rating(book_id: UUID, service: RatingService = Depends(get_rating_service)):
    await service.delete_rating(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
