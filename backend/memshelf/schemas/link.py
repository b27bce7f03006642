import uuid
from datetime import datetime

from pydantic import Field, model_validator

from memshelf.schemas.common import MAX_INT32, CamelModel


class LinkCreate(CamelModel):
    source_note_id: uuid.UUID
    target_note_id: uuid.UUID
    link_text: str = Field(min_length=1, max_length=500)
    position: int = Field(ge=0, le=MAX_INT32)

    @model_validator(mode="after")
    def no_self_link(self) -> "LinkCreate":
        if self.source_note_id == self.target_note_id:
            raise ValueError("A note cannot link to itself")
        return self


class LinkResponse(CamelModel):
    id: uuid.UUID
    source_note_id: uuid.UUID
    target_note_id: uuid.UUID
    link_text: str
    position: int
    created_at: datetime
