import logging
import uuid

import pytest

from personal_library.services.book_service import MAX_PAGE

PROBLEM_JSON = "application/problem+json"


async def post_book(client, body) -> dict:
    response = await client.post("/api/books", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestCreateBook:

    async def test_create_returns_201_with_location(self, client, book_payload):
        body = book_payload(title="Middlemarch", author="George Eliot")

        response = await client.post("/api/books", json=body)

        assert response.status_code == 201
        created = response.json()
        assert response.headers["location"] == f"/api/books/{created['id']}"
        assert created["title"] == "Middlemarch"
        assert created["ownershipStatus"] == "Own"
        assert created["publishedYear"] == body["publishedYear"]
        assert created["score"] is None
        assert created["loanee"] is None

    async def test_empty_title_is_a_validation_problem(self, client):
        response = await client.post(
            "/api/books", json={"title": "", "author": "A", "ownershipStatus": "Own"}
        )

        assert response.status_code == 400
        assert response.headers["content-type"].startswith(PROBLEM_JSON)
        problem = response.json()
        assert problem["status"] == 400
        assert problem["title"] == "Validation Error"
        assert problem["detail"] == "One or more validation errors occurred"
        assert problem["instance"] == "/api/books"
        assert problem["errors"] == {"title": ["Title is required."]}

    async def test_malformed_json_is_keyed_by_body(self, client):
        response = await client.post(
            "/api/books", content=b'{"title": ', headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        problem = response.json()
        assert problem["title"] == "Validation Error"
        assert list(problem["errors"]) == ["body"]

    async def test_validation_fault_is_logged_once(self, client, caplog):
        caplog.set_level(logging.INFO)

        response = await client.post(
            "/api/books", json={"title": "", "author": "A", "ownershipStatus": "Own"}
        )

        assert response.status_code == 400
        records = [
            r for r in caplog.records
            if r.name.startswith("personal_library") and r.levelno >= logging.INFO
        ]
        assert len(records) == 1
        assert records[0].category == "VALIDATION"

    async def test_id_on_create_is_rejected(self, client, book_payload):
        response = await client.post("/api/books", json=book_payload(id=str(uuid.uuid4())))

        assert response.status_code == 400
        assert response.json()["errors"] == {"id": ["Id must not be provided when creating a book."]}

    async def test_wrong_json_type_is_a_validation_problem(self, client, book_payload):
        response = await client.post("/api/books", json=book_payload(publishedYear="last year"))

        assert response.status_code == 400
        problem = response.json()
        assert problem["title"] == "Validation Error"
        assert "publishedYear" in problem["errors"]

    @pytest.mark.parametrize("field", ["pageCount", "publishedYear"])
    async def test_integer_beyond_32_bits_is_a_validation_problem(self, client, book_payload, field):
        response = await client.post("/api/books", json=book_payload(**{field: 2**63}))

        assert response.status_code == 400
        problem = response.json()
        assert problem["title"] == "Validation Error"
        assert list(problem["errors"]) == [field]


@pytest.mark.asyncio
class TestReadBooks:

    async def test_get_book(self, client, book_payload):
        created = await post_book(client, book_payload())

        response = await client.get(f"/api/books/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    async def test_get_missing_book(self, client):
        missing = uuid.uuid4()

        response = await client.get(f"/api/books/{missing}")

        assert response.status_code == 404
        assert response.json() == {
            "status": 404,
            "title": "Not Found",
            "detail": f"Book with ID {missing} not found",
            "instance": f"/api/books/{missing}",
        }

    async def test_malformed_id(self, client):
        response = await client.get("/api/books/not-a-uuid")

        assert response.status_code == 400
        assert "book_id" in response.json()["errors"]

    async def test_list_books(self, client, book_payload):
        for title in ("Emma", "Beloved", "Dracula"):
            await post_book(client, book_payload(title=title))

        response = await client.get("/api/books", params={"page": 1, "pageSize": 2, "sortBy": "title"})

        assert response.status_code == 200
        page = response.json()
        assert [b["title"] for b in page["items"]] == ["Beloved", "Dracula"]
        assert page["totalCount"] == 3
        assert page["page"] == 1
        assert page["pageSize"] == 2
        assert page["totalPages"] == 2

    async def test_list_books_normalizes_bad_paging(self, client, book_payload):
        await post_book(client, book_payload())

        response = await client.get(
            "/api/books", params={"page": 0, "pageSize": 1000, "sortBy": "nope", "sortDirection": "up"}
        )

        page = response.json()
        assert response.status_code == 200
        assert page["page"] == 1
        assert page["pageSize"] == 100
        assert page["totalPages"] == 1

    async def test_list_books_huge_page_is_clamped(self, client, book_payload):
        await post_book(client, book_payload())

        response = await client.get("/api/books", params={"page": 10**17, "pageSize": 100})

        assert response.status_code == 200
        page = response.json()
        assert page["page"] == MAX_PAGE
        assert page["items"] == []
        assert page["totalCount"] == 1


@pytest.mark.asyncio
class TestUpdateDeleteBook:

    async def test_update(self, client, book_payload):
        created = await post_book(client, book_payload())
        body = book_payload(id=created["id"], title="Second Edition", ownershipStatus="WantToBuy")

        response = await client.put(f"/api/books/{created['id']}", json=body)

        assert response.status_code == 204
        fetched = (await client.get(f"/api/books/{created['id']}")).json()
        assert fetched["title"] == "Second Edition"
        assert fetched["ownershipStatus"] == "WantToBuy"

    async def test_update_with_mismatched_id(self, client, book_payload):
        created = await post_book(client, book_payload())

        response = await client.put(
            f"/api/books/{created['id']}", json=book_payload(id=str(uuid.uuid4()))
        )

        assert response.status_code == 400
        problem = response.json()
        assert problem["title"] == "Bad Request"
        assert problem["detail"] == "Id in request body must match route parameter"
        assert "errors" not in problem

    async def test_delete(self, client, book_payload):
        created = await post_book(client, book_payload())

        assert (await client.delete(f"/api/books/{created['id']}")).status_code == 204
        assert (await client.get(f"/api/books/{created['id']}")).status_code == 404
        assert (await client.delete(f"/api/books/{created['id']}")).status_code == 404
