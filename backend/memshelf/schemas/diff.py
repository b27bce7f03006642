import uuid
from datetime import datetime

from pydantic import Field, StrictInt, StrictStr

from memshelf.schemas.common import CamelModel


class DiffCreate(CamelModel):
    position: StrictInt = Field(ge=0)
    length: StrictInt = Field(default=0, ge=0)
    new_text: StrictStr = ""


class DiffResponse(CamelModel):
    id: uuid.UUID
    note_id: uuid.UUID
    position: int
    length: int
    new_text: str
    applied_at: datetime | None
    created_at: datetime


class DiffApplyResponse(CamelModel):
    diff: DiffResponse
    note_id: uuid.UUID
    version: int
    content: str
