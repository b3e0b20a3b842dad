from sqlalchemy import String, Integer, ForeignKey, CheckConstraint, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from personal_library.database.base import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .book import Book


class Rating(Base):
    """
    SQLAlchemy model for a Rating: a 1-10 score plus optional notes, one per book.
    """
    __tablename__ = "ratings"
    __table_args__ = (
        CheckConstraint("score >= 1 AND score <= 10", name="score_range"),
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
        unique=True,
    )

    score: Mapped[int] = mapped_column(Integer, nullable=False)

    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    book: Mapped["Book"] = relationship("Book", back_populates="rating")

    def __repr__(self) -> str:
        return f"<Rating(id={self.id!r}, book_id={self.book_id!r}, score={self.score!r})>"
