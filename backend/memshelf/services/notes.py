import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.config import settings
from memshelf.errors import ConflictError, VersionConflictError
from memshelf.models import Note
from memshelf.schemas.note import NoteUpdate
from memshelf.services.diffs import bump_note_version
from memshelf.services.repository import Page, Repository, order_clause

logger = logging.getLogger(__name__)

ORDER_FIELDS = {
    "createdAt": Note.created_at,
    "updatedAt": Note.updated_at,
    "title": Note.title,
    "version": Note.version,
}


async def list_notes(
    db: AsyncSession,
    workspace_id: uuid.UUID,
    page: int = 1,
    limit: int | None = None,
    order_field: str = "createdAt",
    order_dir: str = "DESC",
) -> Page[Note]:
    limit = min(limit or settings.default_page_size, settings.max_page_size)
    return await Repository(db, Note).paginate(
        Note.workspace_id == workspace_id,
        page=page,
        limit=limit,
        order_by=[order_clause(ORDER_FIELDS, order_field, order_dir)],
    )


async def get_note(db: AsyncSession, note_id: uuid.UUID, include_deleted: bool = False) -> Note | None:
    return await Repository(db, Note).get(note_id, include_deleted=include_deleted)


async def create_note(db: AsyncSession, workspace_id: uuid.UUID, title: str, content: str = "") -> Note:
    note = await Repository(db, Note).save(Note(workspace_id=workspace_id, title=title, content=content, version=1))
    await db.commit()
    logger.info("Note created", extra={"note_id": str(note.id), "workspace_id": str(workspace_id)})
    return note


async def update_note(db: AsyncSession, note: Note, data: NoteUpdate) -> Note:
    """Partial update. Only a change of content moves the version forward."""
    if data.version is not None and data.version != note.version:
        raise VersionConflictError(
            f"Note is at version {note.version}, update was based on version {data.version}"
        )
    values = {}
    if data.title is not None:
        values["title"] = data.title
    content_changed = data.content is not None and data.content != note.content
    if content_changed:
        values["content"] = data.content

    if not values:
        return note

    try:
        if content_changed:
            await bump_note_version(db, note, note.version, **values)
        else:
            await Repository(db, Note).update(note.id, **values)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(note)
    return note


async def soft_delete_note(db: AsyncSession, note: Note) -> None:
    await Repository(db, Note).soft_delete(note)
    await db.commit()
    logger.info("Note moved to trash", extra={"note_id": str(note.id)})


async def list_trash(db: AsyncSession, workspace_id: uuid.UUID) -> list[Note]:
    result = await db.execute(
        Repository(db, Note)
        .query(include_deleted=True)
        .where(Note.workspace_id == workspace_id, Note.deleted_at.is_not(None))
        .order_by(Note.deleted_at.desc())
    )
    return list(result.scalars().all())


async def restore_note(db: AsyncSession, note: Note) -> Note:
    if not note.is_deleted:
        raise ConflictError("Note is not in trash")
    await Repository(db, Note).restore(note)
    await db.commit()
    await db.refresh(note)
    logger.info("Note restored", extra={"note_id": str(note.id)})
    return note
