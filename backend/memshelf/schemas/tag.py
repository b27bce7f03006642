import uuid
from datetime import datetime

from pydantic import Field, field_validator

from memshelf.schemas.common import CamelModel


class TagCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    display_name: str = Field(min_length=1, max_length=100)

    @field_validator("name", "display_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty or whitespace only")
        return value


class TagResponse(CamelModel):
    id: uuid.UUID
    name: str
    display_name: str
    created_at: datetime


class NoteTagCreate(CamelModel):
    tag_id: uuid.UUID


class NoteTagResponse(CamelModel):
    note_id: uuid.UUID
    tag_id: uuid.UUID
    created_at: datetime
