import uuid

from .base import CamelModel
from personal_library.models.enums import ReadingStatusValue


class ReadingStatusDto(CamelModel):
    id: uuid.UUID | None = None
    status: str | None = ReadingStatusValue.BACKLOG.value
