import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.errors import ConflictError, NotFoundError
from memshelf.models import NoteTag, Tag, WorkspaceTag
from memshelf.schemas.tag import TagCreate
from memshelf.services.repository import Repository

logger = logging.getLogger(__name__)


async def list_workspace_tags(db: AsyncSession, workspace_id: uuid.UUID) -> list[Tag]:
    result = await db.execute(
        select(Tag)
        .join(WorkspaceTag, WorkspaceTag.tag_id == Tag.id)
        .where(WorkspaceTag.workspace_id == workspace_id, Tag.deleted_at.is_(None))
        .order_by(Tag.name)
    )
    return list(result.scalars().all())


async def add_tag_to_workspace(db: AsyncSession, workspace_id: uuid.UUID, data: TagCreate) -> Tag:
    """Attach a tag to a workspace, reusing an existing tag of the same name."""
    repo = Repository(db, Tag)
    try:
        tag = await repo.find_one(Tag.name == data.name)
        if tag is None:
            tag = await repo.save(Tag(name=data.name, display_name=data.display_name))
        elif await db.get(WorkspaceTag, (workspace_id, tag.id)) is not None:
            raise ConflictError(f"Tag '{data.name}' is already in this workspace")
        db.add(WorkspaceTag(workspace_id=workspace_id, tag_id=tag.id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Tag added to workspace", extra={"workspace_id": str(workspace_id), "tag_id": str(tag.id)})
    return tag


async def list_note_tags(db: AsyncSession, note_id: uuid.UUID) -> list[Tag]:
    result = await db.execute(
        select(Tag)
        .join(NoteTag, NoteTag.tag_id == Tag.id)
        .where(NoteTag.note_id == note_id, Tag.deleted_at.is_(None))
        .order_by(Tag.name)
    )
    return list(result.scalars().all())


async def add_tag_to_note(db: AsyncSession, note_id: uuid.UUID, tag_id: uuid.UUID) -> NoteTag:
    tag = await Repository(db, Tag).get(tag_id)
    if tag is None:
        raise NotFoundError("Tag not found")
    note_tag = await db.get(NoteTag, (note_id, tag_id))
    if note_tag is not None:
        return note_tag
    note_tag = NoteTag(note_id=note_id, tag_id=tag_id)
    db.add(note_tag)
    await db.commit()
    await db.refresh(note_tag)
    return note_tag


async def remove_tag_from_note(db: AsyncSession, note_id: uuid.UUID, tag_id: uuid.UUID) -> None:
    note_tag = await db.get(NoteTag, (note_id, tag_id))
    if note_tag is None:
        return
    await db.delete(note_tag)
    await db.commit()
