"""Resolve a note and check the caller's access to its workspace."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from memshelf.errors import NotFoundError
from memshelf.models import Note, User
from memshelf.services import notes
from memshelf.services.permissions import AccessLevel, authorize_workspace


async def authorize_note(
    db: AsyncSession,
    note_id: uuid.UUID,
    user: User,
    level: AccessLevel,
    include_deleted: bool = False,
    not_found_message: str = "Note not found",
) -> Note:
    note = await notes.get_note(db, note_id, include_deleted=include_deleted)
    if note is None:
        raise NotFoundError(not_found_message)
    await authorize_workspace(db, note.workspace_id, user, level)
    return note
