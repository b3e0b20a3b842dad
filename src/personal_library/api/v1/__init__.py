from fastapi import APIRouter

from .routers import books, health, loans, ratings, reading_status

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router)
api_router.include_router(books.router)
api_router.include_router(loans.router)
api_router.include_router(ratings.router)
api_router.include_router(reading_status.router)

__all__ = ["api_router"]
