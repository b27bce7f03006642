import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memshelf.database import Base
from memshelf.models.base import EntityMixin


class Link(EntityMixin, Base):
    __tablename__ = "links"
    __table_args__ = (
        UniqueConstraint("source_note_id", "target_note_id", "position", name="uq_link_source_target_position"),
        CheckConstraint("source_note_id <> target_note_id", name="ck_link_no_self_reference"),
    )

    source_note_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    target_note_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    link_text: Mapped[str] = mapped_column(String(500), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    source_note = relationship("Note", foreign_keys=[source_note_id], back_populates="outgoing_links")
    target_note = relationship("Note", foreign_keys=[target_note_id], back_populates="incoming_links")
