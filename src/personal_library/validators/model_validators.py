from typing import Iterable
from sqlalchemy import and_, select, UniqueConstraint
from sqlalchemy.ext.asyncio import AsyncSession


def get_required_columns(model) -> list[str]:
    """
    Columns that are NOT NULL and have no server/default and are not simple auto PKs.
    """
    cols = []
    for col in model.__table__.columns:
        has_default = col.default is not None or col.server_default is not None
        is_auto_pk = col.autoincrement is True and col.primary_key
        if not col.nullable and not has_default and not is_auto_pk:
            cols.append(col.name)
    return cols


def _is_partial(index) -> bool:
    # Partial indexes (WHERE ...) only constrain a subset of rows; a plain
    # equality lookup would report false conflicts, so leave them to the DB.
    return any(
        opts.get("where") is not None
        for opts in index.dialect_options.values()
    )


def get_unique_column_sets(model) -> list[Iterable[str]]:
    """
    Return a list of unique column sets. Each item is an iterable of column names.
    Covers:
      - Column(unique=True)
      - UniqueConstraint in the table
      - Index(..., unique=True) without a WHERE clause
    """
    unique_sets = []

    for col in model.__table__.columns:
        if col.unique:
            unique_sets.append([col.name])

    for constraint in model.__table__.constraints:
        if isinstance(constraint, UniqueConstraint):
            unique_sets.append([c.name for c in constraint.columns])

    for idx in model.__table__.indexes:
        if idx.unique and not _is_partial(idx):
            unique_sets.append([c.name for c in idx.columns])

    return unique_sets


async def find_unique_conflicts(db: AsyncSession, model, kwargs: dict) -> set[str]:
    """
    Run pre-insert queries to detect existing rows that would violate unique constraints.
    Returns a set of column names that conflict (best-effort; the DB stays the final guard).
    """
    conflicts = set()

    for cols in get_unique_column_sets(model):
        if not all(c in kwargs for c in cols):
            continue

        conditions = [getattr(model, c) == kwargs[c] for c in cols]
        res = await db.execute(select(model).where(and_(*conditions)).limit(1))
        if res.scalars().first() is not None:
            conflicts.update(cols)

    return conflicts
