import uuid

import pytest

from personal_library.exceptions.base import PersistenceConflictError
from personal_library.models import OwnershipStatus


@pytest.mark.asyncio
class TestBaseRepositoryCreate:

    async def test_create_success(self, book_repository):
        """
        Behavior:
            - create() flushes and refreshes, so generated id and column defaults are populated.
        """
        book = await book_repository.create(title="Piranesi", author="Susanna Clarke")

        assert isinstance(book.id, uuid.UUID)
        assert book.title == "Piranesi"
        assert book.ownership_status is OwnershipStatus.WANT_TO_BUY

    async def test_create_missing_required_fields(self, book_repository):
        """
        Behavior:
            - Every missing NOT NULL column is reported at once, before touching the DB.
        """
        with pytest.raises(PersistenceConflictError) as exc_info:
            await book_repository.create(description="no title, no author")

        assert exc_info.value.kind == "not_null"
        assert set(exc_info.value.fields) == {"title", "author"}

    async def test_create_duplicate_unique_column(self, created_book, rating_repository, db_session):
        await rating_repository.create(book_id=created_book.id, score=7)
        await db_session.commit()

        with pytest.raises(PersistenceConflictError) as exc_info:
            await rating_repository.create(book_id=created_book.id, score=9)

        assert exc_info.value.kind == "unique"
        assert exc_info.value.fields == ["book_id"]

    async def test_foreign_key_violation_is_mapped(self, rating_repository):
        with pytest.raises(PersistenceConflictError) as exc_info:
            await rating_repository.create(book_id=uuid.uuid4(), score=5)

        assert exc_info.value.kind == "foreign_key"

    async def test_check_constraint_is_mapped(self, created_book, rating_repository):
        with pytest.raises(PersistenceConflictError) as exc_info:
            await rating_repository.create(book_id=created_book.id, score=42)

        assert exc_info.value.kind == "check"


@pytest.mark.asyncio
class TestBaseRepositoryRead:

    async def test_get_by_id(self, book_repository, created_book):
        assert (await book_repository.get_by_id(created_book.id)).id == created_book.id
        assert await book_repository.get_by_id(uuid.uuid4()) is None

    async def test_find_by_field(self, book_repository, created_book):
        found = await book_repository.find_by_field("title", created_book.title)
        assert found.id == created_book.id

    async def test_find_by_unknown_field_raises(self, book_repository):
        with pytest.raises(AttributeError):
            await book_repository.find_by_field("colour", "red")

    async def test_exists_and_count(self, book_repository, create_book):
        book = await create_book(ownership_status=OwnershipStatus.OWN)
        await create_book(ownership_status=OwnershipStatus.WANT_TO_BUY)

        assert await book_repository.exists(book.id)
        assert not await book_repository.exists(uuid.uuid4())
        assert await book_repository.count() == 2
        assert await book_repository.count(ownership_status=OwnershipStatus.OWN) == 1


@pytest.mark.asyncio
class TestBaseRepositoryUpdateDelete:

    async def test_update_replaces_fields_including_null(self, book_repository, create_book):
        book = await create_book(notes="old notes")

        updated = await book_repository.update(book.id, title="New title", notes=None)

        assert updated.title == "New title"
        assert updated.notes is None

    async def test_update_unknown_id_returns_none(self, book_repository):
        assert await book_repository.update(uuid.uuid4(), title="x") is None

    async def test_delete(self, book_repository, created_book):
        assert await book_repository.delete(created_book.id) is True
        assert await book_repository.delete(created_book.id) is False
