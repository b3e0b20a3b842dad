import json
import logging

import pytest
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from personal_library.api.v1.error_handlers import (
    PERSISTENCE_DETAIL,
    PROBLEM_MEDIA_TYPE,
    UNEXPECTED_DETAIL,
    VALIDATION_DETAIL,
    ProblemMapper,
    _DETAIL_BUILDERS,
)
from personal_library.exceptions.base import (
    BadRequestError,
    BusinessRuleError,
    FaultCategory,
    NotFoundError,
    PersistenceConflictError,
    ValidationFailedError,
)

INSTANCE = "/api/books/123"
HANDLER_LOGGER = "personal_library.api.v1.error_handlers"


def make_request(method: str = "GET", path: str = INSTANCE) -> Request:
    return Request({"type": "http", "method": method, "path": path, "headers": [], "query_string": b""})


@pytest.fixture
def production_mapper() -> ProblemMapper:
    return ProblemMapper(diagnostic_mode=False)


@pytest.fixture
def diagnostic_mapper() -> ProblemMapper:
    return ProblemMapper(diagnostic_mode=True)


class TestBuild:

    def test_every_category_has_a_detail_builder(self):
        assert set(_DETAIL_BUILDERS) == set(FaultCategory)

    def test_not_found(self, production_mapper):
        problem = production_mapper.build(NotFoundError("Book with ID 123 not found"), INSTANCE)

        assert (problem.status, problem.title) == (404, "Not Found")
        assert problem.detail == "Book with ID 123 not found"
        assert problem.instance == INSTANCE
        assert problem.errors is None

    def test_bad_request(self, production_mapper):
        problem = production_mapper.build(
            BadRequestError("Id in request body must match route parameter"), INSTANCE
        )
        assert (problem.status, problem.title) == (400, "Bad Request")
        assert problem.detail == "Id in request body must match route parameter"

    def test_business_rule(self, production_mapper):
        problem = production_mapper.build(BusinessRuleError("Book with ID 1 is already loaned to Bob"), INSTANCE)
        assert (problem.status, problem.title) == (409, "Business Rule Violation")
        assert problem.detail == "Book with ID 1 is already loaned to Bob"

    def test_validation_carries_errors(self, production_mapper):
        exc = ValidationFailedError({"title": ["Title is required."]})

        problem = production_mapper.build(exc, "/api/books")

        assert (problem.status, problem.title) == (400, "Validation Error")
        assert problem.detail == VALIDATION_DETAIL
        assert problem.errors == {"title": ["Title is required."]}

    def test_request_validation_errors_are_keyed_by_field(self, production_mapper):
        exc = RequestValidationError([
            {"loc": ("body", "publishedYear"), "msg": "Input should be a valid integer", "type": "int_parsing"},
            {"loc": ("body", "publishedYear"), "msg": "second", "type": "x"},
            {"loc": ("path", "book_id"), "msg": "Input should be a valid UUID", "type": "uuid_parsing"},
        ])

        problem = production_mapper.build(exc, INSTANCE)

        assert problem.status == 400
        assert problem.title == "Validation Error"
        assert problem.errors == {
            "publishedYear": ["Input should be a valid integer", "second"],
            "book_id": ["Input should be a valid UUID"],
        }

    def test_request_validation_errors_skip_positional_locations(self, production_mapper):
        exc = RequestValidationError([
            {"loc": ("body", 1), "msg": "JSON decode error", "type": "json_invalid"},
            {"loc": ("body", "tags", 0), "msg": "Input should be a valid string", "type": "string_type"},
            {"loc": (), "msg": "Field required", "type": "missing"},
        ])

        problem = production_mapper.build(exc, INSTANCE)

        assert problem.errors == {
            "body": ["JSON decode error", "Field required"],
            "tags": ["Input should be a valid string"],
        }

    @pytest.mark.parametrize("mapper_fixture", ["production_mapper", "diagnostic_mapper"])
    def test_persistence_detail_is_always_generic(self, request, mapper_fixture):
        mapper = request.getfixturevalue(mapper_fixture)
        exc = PersistenceConflictError("Loan already exists", kind="unique", fields=["book_id"])

        problem = mapper.build(exc, "/api/books/1/loan")

        assert (problem.status, problem.title) == (409, "Database Update Error")
        assert problem.detail == PERSISTENCE_DETAIL

    def test_raw_integrity_error_is_a_persistence_conflict(self, diagnostic_mapper):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: loans.book_id"))

        problem = diagnostic_mapper.build(exc, INSTANCE)

        assert problem.status == 409
        assert "UNIQUE" not in problem.detail

    def test_unclassified_in_production_hides_message(self, production_mapper):
        problem = production_mapper.build(RuntimeError("connection string leaked"), INSTANCE)

        assert (problem.status, problem.title) == (500, "Internal Server Error")
        assert problem.detail == UNEXPECTED_DETAIL

    def test_unclassified_in_diagnostic_mode_shows_message(self, diagnostic_mapper):
        problem = diagnostic_mapper.build(RuntimeError("division went wrong"), INSTANCE)
        assert problem.detail == "division went wrong"

    def test_framework_http_errors(self, production_mapper):
        not_found = production_mapper.build(StarletteHTTPException(404, "Not Found"), "/nope")
        not_allowed = production_mapper.build(StarletteHTTPException(405, "Method Not Allowed"), "/api/books")

        assert (not_found.status, not_found.title) == (404, "Not Found")
        assert (not_allowed.status, not_allowed.title) == (400, "Bad Request")
        assert not_allowed.detail == "Method Not Allowed"


@pytest.mark.asyncio
class TestHandle:

    async def test_response_shape(self, production_mapper):
        response = await production_mapper.handle(make_request(), NotFoundError("Book with ID 123 not found"))

        assert response.status_code == 404
        assert response.media_type == PROBLEM_MEDIA_TYPE
        body = json.loads(response.body)
        assert body == {
            "status": 404,
            "title": "Not Found",
            "detail": "Book with ID 123 not found",
            "instance": INSTANCE,
        }

    async def test_logs_once_with_context(self, production_mapper, caplog):
        caplog.set_level(logging.INFO, logger=HANDLER_LOGGER)

        await production_mapper.handle(make_request("DELETE"), BusinessRuleError("nope"))

        records = [r for r in caplog.records if r.name == HANDLER_LOGGER]
        assert len(records) == 1
        record = records[0]
        assert record.levelno == logging.WARNING
        assert record.exc_info is not None
        assert record.category == "BUSINESS_RULE"
        assert record.method == "DELETE"
        assert record.path == INSTANCE

    async def test_unclassified_logged_as_error(self, production_mapper, caplog):
        caplog.set_level(logging.INFO, logger=HANDLER_LOGGER)

        response = await production_mapper.handle(make_request(), KeyError("missing"))

        records = [r for r in caplog.records if r.name == HANDLER_LOGGER]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert response.status_code == 500
        assert json.loads(response.body)["detail"] == UNEXPECTED_DETAIL

    async def test_fault_is_logged_before_response_is_built(self, production_mapper, caplog, monkeypatch):
        caplog.set_level(logging.INFO, logger=HANDLER_LOGGER)
        classify_calls = []
        logged_before_build = []

        original_classify = ProblemMapper.classify
        original_build = ProblemMapper.build

        def counting_classify(exc):
            classify_calls.append(exc)
            return original_classify(exc)

        def checking_build(self, *args, **kwargs):
            logged_before_build.append(any(r.name == HANDLER_LOGGER for r in caplog.records))
            return original_build(self, *args, **kwargs)

        monkeypatch.setattr(ProblemMapper, "classify", staticmethod(counting_classify))
        monkeypatch.setattr(ProblemMapper, "build", checking_build)

        response = await production_mapper.handle(make_request(), NotFoundError("gone"))

        assert response.status_code == 404
        assert len(classify_calls) == 1
        assert logged_before_build == [True]
