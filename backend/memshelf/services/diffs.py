"""Note versioning through an append-only log of positional text edits.

A diff replaces ``length`` characters at ``position`` with ``new_text``. Applying
one rewrites the note content and bumps its version by exactly one; the diff
row and the note update share a single transaction.

Concurrent writers are serialized optimistically: the version read before the
edit is part of the UPDATE's WHERE clause, so only one writer per version wins
and the loser gets ``VersionConflictError`` without any partial write.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.errors import ValidationFailedError, VersionConflictError
from memshelf.models import Diff, Note
from memshelf.models.base import utcnow
from memshelf.schemas.diff import DiffCreate
from memshelf.services.repository import Page, Repository

logger = logging.getLogger(__name__)


def apply_text_edit(content: str, position: int, length: int, new_text: str) -> str:
    if position < 0 or length < 0:
        raise ValidationFailedError("Diff position and length must be non-negative")
    if position > len(content) or position + length > len(content):
        raise ValidationFailedError(
            f"Diff range [{position}, {position + length}) is outside the note content (length {len(content)})",
            validation_errors=[
                {"path": "position", "message": "Edit range exceeds note content", "code": "out_of_range"}
            ],
        )
    return content[:position] + new_text + content[position + length :]


async def bump_note_version(db: AsyncSession, note: Note, expected_version: int, **values) -> None:
    """Compare-and-swap update: write ``values`` and ``version + 1`` only if the version is unchanged."""
    rows = await Repository(db, Note).update(
        note.id,
        Note.version == expected_version,
        version=Note.version + 1,
        **values,
    )
    if rows == 0:
        logger.warning(
            "Version conflict on note",
            extra={"note_id": str(note.id), "expected_version": expected_version},
        )
        raise VersionConflictError()


async def apply_diff(db: AsyncSession, note: Note, data: DiffCreate) -> tuple[Diff, Note]:
    read_version = note.version
    updated_content = apply_text_edit(note.content, data.position, data.length, data.new_text)

    try:
        await bump_note_version(db, note, read_version, content=updated_content)
        diff = await Repository(db, Diff).save(
            Diff(
                note_id=note.id,
                position=data.position,
                length=data.length,
                new_text=data.new_text,
                applied_at=utcnow(),
            )
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(note)
    logger.info(
        "Diff applied",
        extra={"note_id": str(note.id), "diff_id": str(diff.id), "version": note.version},
    )
    return diff, note


async def list_diffs(db: AsyncSession, note_id: uuid.UUID, page: int = 1, limit: int = 10) -> Page[Diff]:
    return await Repository(db, Diff).paginate(
        Diff.note_id == note_id,
        page=page,
        limit=limit,
        order_by=[Diff.created_at.desc()],
    )
