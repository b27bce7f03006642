import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memshelf.database import Base
from memshelf.models.base import EntityMixin


class Diff(EntityMixin, Base):
    """One positional edit in a note's append-only log. Rows are never updated."""

    __tablename__ = "diffs"

    note_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    length: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    new_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    applied_at: Mapped[datetime | None] = mapped_column(default=None, nullable=True)

    note = relationship("Note", back_populates="diffs")
