from sqlalchemy import ForeignKey, UUID, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from personal_library.database.base import Base
from .enums import ReadingStatusValue, enum_values
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .book import Book


class ReadingStatus(Base):
    """
    SQLAlchemy model for the reading progress of a book (one per book).
    """
    __tablename__ = "reading_statuses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    book_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    status: Mapped[ReadingStatusValue] = mapped_column(
        SQLEnum(
            ReadingStatusValue,
            name="reading_status",
            native_enum=False,
            length=32,
            values_callable=enum_values,
        ),
        nullable=False,
    )

    book: Mapped["Book"] = relationship("Book", back_populates="reading_status")

    def __repr__(self) -> str:
        return f"<ReadingStatus(id={self.id!r}, book_id={self.book_id!r}, status={self.status!r})>"
