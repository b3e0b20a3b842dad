from sqlalchemy import String, DateTime, Boolean, ForeignKey, Index, UUID, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from personal_library.database.base import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .book import Book


class Loan(Base):
    """
    SQLAlchemy model for a Loan.

    A loan records who borrowed a book and when. Returned loans are kept as history;
    only one loan per book may be active (not returned) at a time.
    """
    __tablename__ = "loans"
    __table_args__ = (
        # One active loan per book. Partial index so returned loans don't collide.
        Index(
            "uq_loans_book_id_active",
            "book_id",
            unique=True,
            sqlite_where=text("is_returned = 0"),
            postgresql_where=text("NOT is_returned"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    book_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    borrowed_to: Mapped[str] = mapped_column(String(100), nullable=False)

    loan_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    is_returned: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )

    returned_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # --- Relationships ---

    # Many-to-One: each loan belongs to a single book
    book: Mapped["Book"] = relationship("Book", back_populates="loans")

    def __repr__(self) -> str:
        return (
            f"<Loan(id={self.id!r}, book_id={self.book_id!r}, "
            f"borrowed_to={self.borrowed_to!r}, is_returned={self.is_returned!r})>"
        )
