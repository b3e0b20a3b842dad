"""
Rule tables for the request DTOs.

Field names are wire (camelCase) names; they become the keys of the `errors`
object in a 400 Validation Error response.
"""

from personal_library.models.enums import OwnershipStatus, ReadingStatusValue
from .rules import (
    ValidationRule,
    Validator,
    between,
    greater_than,
    is_in_enum,
    is_null,
    max_length,
    not_empty,
    not_null,
    when_present,
)

# Fields shared by create and update
_BOOK_FIELD_RULES = (
    ValidationRule("title", not_empty, "Title is required."),
    ValidationRule("title", max_length(100), "Title must not exceed 100 characters."),
    ValidationRule("author", not_empty, "Author is required."),
    ValidationRule("author", max_length(100), "Author must not exceed 100 characters."),
    ValidationRule("description", max_length(500), "Description must not exceed 500 characters.",
                   when=when_present("description")),
    ValidationRule("notes", max_length(1000), "Notes must not exceed 1000 characters.",
                   when=when_present("notes")),
    ValidationRule("isbn", max_length(20), "ISBN must not exceed 20 characters.",
                   when=when_present("isbn")),
    ValidationRule("publishedYear", between(1000, 2100), "Published year must be between 1000 and 2100.",
                   when=when_present("publishedYear")),
    ValidationRule("pageCount", greater_than(0), "Page count must be positive.",
                   when=when_present("pageCount")),
    ValidationRule("ownershipStatus", is_in_enum(OwnershipStatus), "Invalid ownership status."),
)

CREATE_BOOK_VALIDATOR = Validator(
    (
        ValidationRule("id", is_null, "Id must not be provided when creating a book."),
        *_BOOK_FIELD_RULES,
    ),
    name="create_book",
)

UPDATE_BOOK_VALIDATOR = Validator(
    (
        ValidationRule("id", not_null, "Id must be provided when updating a book."),
        *_BOOK_FIELD_RULES,
    ),
    name="update_book",
)

LOAN_VALIDATOR = Validator(
    (
        ValidationRule("borrowedTo", not_empty, "Borrower name is required."),
        ValidationRule("borrowedTo", max_length(100), "Borrower name must not exceed 100 characters."),
    ),
    name="loan",
)

RATING_VALIDATOR = Validator(
    (
        ValidationRule("score", between(1, 10), "Score must be between 1 and 10."),
        ValidationRule("notes", max_length(1000), "Notes must not exceed 1000 characters.",
                       when=when_present("notes")),
    ),
    name="rating",
)

READING_STATUS_VALIDATOR = Validator(
    (
        ValidationRule("status", is_in_enum(ReadingStatusValue), "Invalid reading status."),
    ),
    name="reading_status",
)
