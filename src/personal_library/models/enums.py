from enum import Enum


class OwnershipStatus(str, Enum):
    """Whether the book is on the shelf, wanted, or gone."""
    WANT_TO_BUY = "WantToBuy"
    OWN = "Own"
    SOLD_OR_GAVE_AWAY = "SoldOrGaveAway"


class ReadingStatusValue(str, Enum):
    """Progress of the owner through a book."""
    BACKLOG = "Backlog"
    COMPLETED = "Completed"
    ABANDONED = "Abandoned"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    # Persist the wire value ("WantToBuy"), not the member name ("WANT_TO_BUY").
    return [member.value for member in enum_cls]
