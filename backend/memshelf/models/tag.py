import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memshelf.database import Base
from memshelf.models.base import EntityMixin, utcnow


class WorkspaceTag(Base):
    __tablename__ = "workspace_tags"

    workspace_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("workspaces.id", ondelete="CASCADE"), primary_key=True)
    tag_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    workspace = relationship("Workspace", back_populates="workspace_tags")
    tag = relationship("Tag", back_populates="workspace_tags")


class NoteTag(Base):
    __tablename__ = "note_tags"

    note_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True)
    tag_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    note = relationship("Note", back_populates="note_tags")
    tag = relationship("Tag", back_populates="note_tags")


class Tag(EntityMixin, Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    note_tags = relationship("NoteTag", back_populates="tag", cascade="all, delete-orphan")
    workspace_tags = relationship("WorkspaceTag", back_populates="tag", cascade="all, delete-orphan")
    notes = relationship("Note", secondary="note_tags", viewonly=True)
