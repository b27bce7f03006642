import uuid
from datetime import datetime

from pydantic import Field

from memshelf.schemas.common import MAX_INT32, CamelModel


class NoteCreate(CamelModel):
    workspace_id: uuid.UUID
    title: str = Field(min_length=1, max_length=500)
    content: str = ""


class NoteUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: str | None = None
    # Version the client last saw; the update is refused if the note has moved on.
    version: int | None = Field(default=None, ge=1, le=MAX_INT32)


class NoteResponse(CamelModel):
    id: uuid.UUID
    workspace_id: uuid.UUID
    title: str
    content: str
    version: int
    created_at: datetime
    updated_at: datetime


class TrashItem(CamelModel):
    id: uuid.UUID
    workspace_id: uuid.UUID
    title: str
    version: int
    deleted_at: datetime
