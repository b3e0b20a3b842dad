from pydantic import BaseModel


class ProblemResponse(BaseModel):
    """
    Stable error payload returned for every failed request.

    Serialized with `exclude_none=True`, so `errors` only appears for validation failures:
        {
            "status": 400,
            "title": "Validation Error",
            "detail": "One or more validation errors occurred",
            "instance": "/api/books",
            "errors": {"title": ["Title is required."]}
        }
    """
    status: int
    title: str
    detail: str
    instance: str
    errors: dict[str, list[str]] | None = None
