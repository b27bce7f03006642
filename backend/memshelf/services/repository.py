"""Generic storage access for soft-deletable entities.

Default queries only see live rows (``deleted_at IS NULL``). The unit of work is
the caller's ``AsyncSession``: nothing here commits, so several repository
calls made inside one request land in a single transaction.
"""

import math
import uuid
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Sequence, TypeVar

from sqlalchemy import ColumnElement, Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.errors import ValidationFailedError
from memshelf.models.base import EntityMixin, utcnow

T = TypeVar("T", bound=EntityMixin)


def order_clause(fields: Mapping[str, Any], order_field: str, order_dir: str) -> ColumnElement:
    """Translate the ``orderField``/``orderDir`` query pair into an ORDER BY term from a whitelist."""
    column = fields.get(order_field)
    if column is None:
        raise ValidationFailedError(
            f"Cannot order by '{order_field}'",
            validation_errors=[
                {
                    "path": "orderField",
                    "message": f"Expected one of: {', '.join(fields)}",
                    "code": "invalid_enum_value",
                }
            ],
        )
    direction = order_dir.upper()
    if direction not in ("ASC", "DESC"):
        raise ValidationFailedError(
            f"Invalid order direction '{order_dir}'",
            validation_errors=[{"path": "orderDir", "message": "Expected ASC or DESC", "code": "invalid_enum_value"}],
        )
    return column.asc() if direction == "ASC" else column.desc()


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit > 0 else 0


class Repository(Generic[T]):
    def __init__(self, db: AsyncSession, model: type[T]):
        self.db = db
        self.model = model

    def query(self, include_deleted: bool = False) -> Select:
        q = select(self.model)
        if not include_deleted:
            q = q.where(self.model.deleted_at.is_(None))
        return q

    async def get(self, entity_id: uuid.UUID, include_deleted: bool = False) -> T | None:
        result = await self.db.execute(self.query(include_deleted).where(self.model.id == entity_id))
        return result.scalar_one_or_none()

    async def find_one(self, *where: ColumnElement[bool]) -> T | None:
        result = await self.db.execute(self.query().where(*where).limit(1))
        return result.scalar_one_or_none()

    async def find_many(self, *where: ColumnElement[bool], order_by: Sequence[Any] = ()) -> list[T]:
        q = self.query().where(*where)
        if order_by:
            q = q.order_by(*order_by)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def paginate(
        self,
        *where: ColumnElement[bool],
        page: int = 1,
        limit: int = 10,
        order_by: Sequence[Any] = (),
        include_deleted: bool = False,
    ) -> Page[T]:
        base = self.query(include_deleted).where(*where)
        total = await self.db.scalar(select(func.count()).select_from(base.order_by(None).subquery()))
        q = base.order_by(*order_by, self.model.id.desc()).offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(q)
        return Page(items=list(result.scalars().all()), total=total or 0, page=page, limit=limit)

    async def save(self, entity: T) -> T:
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity_id: uuid.UUID, *where: ColumnElement[bool], **values: Any) -> int:
        """Partial update of one live row. Extra ``where`` clauses act as a guard; returns rows affected."""
        result = await self.db.execute(
            update(self.model)
            .where(self.model.id == entity_id, self.model.deleted_at.is_(None), *where)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def soft_delete(self, entity: T) -> None:
        entity.deleted_at = utcnow()
        await self.db.flush()

    async def restore(self, entity: T) -> None:
        entity.deleted_at = None
        await self.db.flush()

    async def remove(self, entity: T) -> None:
        await self.db.delete(entity)
        await self.db.flush()
