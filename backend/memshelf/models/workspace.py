from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memshelf.database import Base
from memshelf.models.base import EntityMixin


class Workspace(EntityMixin, Base):
    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    notes = relationship("Note", back_populates="workspace")
    permissions = relationship("Permission", back_populates="workspace")
    workspace_tags = relationship("WorkspaceTag", back_populates="workspace", cascade="all, delete-orphan")
