from sqlalchemy import String, Integer, UUID, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from personal_library.database.base import Base
from .enums import OwnershipStatus, enum_values
import uuid
from typing import TYPE_CHECKING

# Avoid circular import issues when using type hints for related models
if TYPE_CHECKING:
    from .loan import Loan
    from .rating import Rating
    from .reading_status import ReadingStatus


class Book(Base):
    """
    SQLAlchemy model for a Book.

    A book owns at most one rating and one reading status, and any number of loans.
    All of them are removed together with the book.
    """
    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    author: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)

    published_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Stored as its string value so the column stays readable outside the app
    ownership_status: Mapped[OwnershipStatus] = mapped_column(
        SQLEnum(
            OwnershipStatus,
            name="ownership_status",
            native_enum=False,
            length=32,
            values_callable=enum_values,
        ),
        nullable=False,
        default=OwnershipStatus.WANT_TO_BUY,
    )

    # --- Relationships ---

    # One-to-One: at most one rating per book
    rating: Mapped["Rating | None"] = relationship(
        "Rating",
        back_populates="book",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # One-to-One: at most one reading status per book
    reading_status: Mapped["ReadingStatus | None"] = relationship(
        "ReadingStatus",
        back_populates="book",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # One-to-Many: full loan history
    loans: Mapped[list["Loan"]] = relationship(
        "Loan",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # The loan currently out, if any (read-only view over `loans`)
    active_loan: Mapped["Loan | None"] = relationship(
        "Loan",
        primaryjoin="and_(Book.id == Loan.book_id, Loan.is_returned == False)",
        uselist=False,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id!r}, title={self.title!r}, author={self.author!r})>"
