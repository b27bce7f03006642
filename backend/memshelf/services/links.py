import logging
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from memshelf.models import Link, Note
from memshelf.schemas.link import LinkCreate
from memshelf.services.repository import Repository

logger = logging.getLogger(__name__)


async def list_note_links(db: AsyncSession, note_id: uuid.UUID) -> list[Link]:
    """Outgoing and incoming links of a note whose both ends are live, oldest first."""
    source = aliased(Note)
    target = aliased(Note)
    result = await db.execute(
        select(Link)
        .join(source, source.id == Link.source_note_id)
        .join(target, target.id == Link.target_note_id)
        .where(
            or_(Link.source_note_id == note_id, Link.target_note_id == note_id),
            Link.deleted_at.is_(None),
            source.deleted_at.is_(None),
            target.deleted_at.is_(None),
        )
        .order_by(Link.created_at.asc())
    )
    return list(result.scalars().all())


async def get_link(db: AsyncSession, link_id: uuid.UUID) -> Link | None:
    return await Repository(db, Link).get(link_id)


async def create_link(db: AsyncSession, data: LinkCreate) -> Link:
    try:
        link = await Repository(db, Link).save(
            Link(
                source_note_id=data.source_note_id,
                target_note_id=data.target_note_id,
                link_text=data.link_text,
                position=data.position,
            )
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(
        "Link created",
        extra={"link_id": str(link.id), "source": str(data.source_note_id), "target": str(data.target_note_id)},
    )
    return link


async def delete_link(db: AsyncSession, link: Link) -> None:
    await Repository(db, Link).remove(link)
    await db.commit()
    logger.info("Link removed", extra={"link_id": str(link.id)})
