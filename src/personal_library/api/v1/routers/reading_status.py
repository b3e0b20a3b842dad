from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from personal_library.core.dependencies import get_reading_status_service
from personal_library.schemas import ReadingStatusDto
from personal_library.services import ReadingStatusService

router = APIRouter(prefix="/books/{book_id}/reading-status", tags=["reading-status"])


@router.put("", response_model=ReadingStatusDto)
async def set_reading_status(
    book_id: UUID,
    dto: ReadingStatusDto,
    service: ReadingStatusService = Depends(get_reading_status_service),
):
    return await service.set_status(book_id, dto)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reading_status(
    book_id: UUID,
    service: ReadingStatusService = Depends(get_reading_status_service),
):
    await service.delete_status(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
