import uuid

from .base import CamelModel, Int32


class RatingDto(CamelModel):
    id: uuid.UUID | None = None
    score: Int32 = 0
    notes: str | None = None
