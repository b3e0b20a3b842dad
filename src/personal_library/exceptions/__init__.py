# personal_library/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # App-level errors and their FaultCategory
# │   ├── integrity_classifier.py    # SQL-level / DB-specific constraint classification
# │   └── mapper.py                  # IntegrityError -> PersistenceConflictError, db_error_handler

from .base import (
    FaultCategory,
    LibraryError,
    NotFoundError,
    BadRequestError,
    BusinessRuleError,
    ValidationFailedError,
    PersistenceConflictError,
)

__all__ = [
    "FaultCategory",
    "LibraryError",
    "NotFoundError",
    "BadRequestError",
    "BusinessRuleError",
    "ValidationFailedError",
    "PersistenceConflictError",
]
