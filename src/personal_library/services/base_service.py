from sqlalchemy.ext.asyncio import AsyncSession

from personal_library.exceptions.mapper import db_error_handler


class BaseService:
    """
    Shared plumbing for services: the request's session and a guarded commit.

    Services own the transaction boundary. Repositories flush inside
    db_error_handler; commit() is guarded the same way so a constraint that only
    fires at COMMIT still surfaces as PersistenceConflictError.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def commit(self, model_name: str | None = None) -> None:
        async with db_error_handler(self.db, model_name):
            await self.db.commit()
