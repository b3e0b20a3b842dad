"""Normalizers applied to raw environment values before Settings validates them."""


def to_uppercase(value: str | None) -> str | None:
    return value.upper() if isinstance(value, str) else value


def to_lowercase(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def split_comma_separated(value: str | None) -> list[str]:
    """Turn "a, b,,c" into ["a", "b", "c"]."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
