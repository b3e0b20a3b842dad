from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from personal_library.core.dependencies import get_book_service
from personal_library.schemas import BookDetailsDto, BookDto, PaginatedResponse
from personal_library.services import BookService
from personal_library.services.book_service import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=PaginatedResponse[BookDetailsDto])
async def list_books(
    page: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    sort_by: str = Query("title", alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection"),
    service: BookService = Depends(get_book_service),
):
    """Out-of-range paging and unknown sort options are normalized, never rejected."""
    return await service.list_books(page, page_size, sort_by, sort_direction)


@router.get("/{book_id}", response_model=BookDetailsDto)
async def get_book(book_id: UUID, service: BookService = Depends(get_book_service)):
    return await service.get_book(book_id)


@router.post("", response_model=BookDetailsDto, status_code=status.HTTP_201_CREATED)
async def create_book(
    dto: BookDto,
    request: Request,
    response: Response,
    service: BookService = Depends(get_book_service),
):
    created = await service.create_book(dto)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{created.id}"
    return created


@router.put("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_book(
    book_id: UUID,
    dto: BookDto,
    service: BookService = Depends(get_book_service),
):
    await service.update_book(book_id, dto)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: UUID, service: BookService = Depends(get_book_service)):
    await service.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
