"""Ordered child collections: template exercises, routine templates, workout exercises, logged sets.

All four keep a 1-based ``position`` unique within their parent. Appends go to
MAX(position) + 1, removals leave gaps, and only an explicit reorder renumbers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import ColumnElement, delete, func, insert, literal, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.exceptions import StorageError, ValidationError
from liftlog.db.session import atomic

logger = logging.getLogger(__name__)


class PositionalCollection:
    """Children of ``model`` grouped by the ``parent_key`` column."""

    def __init__(self, model: type, parent_key: str, label: str):
        self.model = model
        self.table = model.__table__
        self.parent_key = parent_key
        self.parent_column = getattr(model, parent_key)
        self.label = label

    def next_position(self, parent_id: int):
        """Scalar subquery: COALESCE(MAX(position), 0) + 1 within the parent."""
        return (
            select(func.coalesce(func.max(self.table.c.position), 0) + 1)
            .where(self.table.c[self.parent_key] == parent_id)
            .correlate(None)
            .scalar_subquery()
        )

    async def append(
        self,
        db: AsyncSession,
        parent_id: int,
        guard: ColumnElement[bool],
        **values,
    ) -> int | None:
        """Insert a child at the next position if ``guard`` holds.

        Position, guard and insert are one INSERT ... SELECT statement, so a
        concurrent status change cannot slip between check and write.
        Returns the new row id, or None when the guard rejected the insert.
        """
        columns = [self.parent_key, *values, "position"]
        source = select(
            literal(parent_id, self.table.c[self.parent_key].type),
            *(literal(value, self.table.c[name].type) for name, value in values.items()),
            self.next_position(parent_id),
        ).where(guard)
        stmt = insert(self.table).from_select(columns, source).returning(self.table.c.id)
        async with atomic(db, f"add {self.label}"):
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

    async def reorder(
        self,
        db: AsyncSession,
        parent_id: int,
        ordered_ids: Sequence[int],
        guard: ColumnElement[bool] | None = None,
    ) -> None:
        """Set position = index + 1 for each id, all-or-nothing.

        Rows are first parked on negative positions and then flipped, so the
        (parent, position) unique constraint holds after every statement.
        """
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValidationError(f"Duplicate ids in {self.label} order")
        if guard is None:
            guard = true()
        async with atomic(db, f"reorder {self.label}s"):
            for index, child_id in enumerate(ordered_ids, start=1):
                result = await db.execute(
                    update(self.model)
                    .where(self.model.id == child_id, self.parent_column == parent_id, guard)
                    .values(position=-index)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    logger.warning(
                        "Reorder of %s under %s aborted at id %s", self.label, parent_id, child_id
                    )
                    raise StorageError(
                        f"Cannot reorder: {self.label} {child_id} is not part of {parent_id}"
                    )
            await db.execute(
                update(self.model)
                .where(self.parent_column == parent_id, self.model.position < 0)
                .values(position=-self.model.position)
                .execution_options(synchronize_session=False)
            )

    async def remove(
        self,
        db: AsyncSession,
        child_id: int,
        guard: ColumnElement[bool] | None = None,
    ) -> bool:
        """Delete one child without renumbering its siblings."""
        stmt = (
            delete(self.model)
            .where(self.model.id == child_id)
            .execution_options(synchronize_session=False)
        )
        if guard is not None:
            stmt = stmt.where(guard)
        async with atomic(db, f"remove {self.label}"):
            result = await db.execute(stmt)
        return result.rowcount > 0

    async def parent_of(self, db: AsyncSession, child_id: int) -> int | None:
        result = await db.execute(select(self.parent_column).where(self.model.id == child_id))
        return result.scalar_one_or_none()
