import uuid

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memshelf.database import Base
from memshelf.models.base import EntityMixin


class Note(EntityMixin, Base):
    __tablename__ = "notes"

    workspace_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    # Bumped only by diff application or a content-changing update, never by the ORM.
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    workspace = relationship("Workspace", back_populates="notes")
    diffs = relationship("Diff", back_populates="note", cascade="all, delete-orphan")
    note_tags = relationship("NoteTag", back_populates="note", cascade="all, delete-orphan")
    tags = relationship("Tag", secondary="note_tags", viewonly=True)
    outgoing_links = relationship(
        "Link", foreign_keys="Link.source_note_id", back_populates="source_note", cascade="all, delete-orphan"
    )
    incoming_links = relationship(
        "Link", foreign_keys="Link.target_note_id", back_populates="target_note", cascade="all, delete-orphan"
    )
