# Note model for user content
import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID, StringListType

if TYPE_CHECKING:
    from .user import User


class Note(BaseModel):
    """Text note with an ordered tag list."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # ordered, duplicates allowed
    tags: Mapped[List[str]] = mapped_column(StringListType, nullable=False, default=list)

    # owner reference
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="notes",
        lazy="joined",
        doc="User who created and owns this note",
    )

    __table_args__ = (
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_updated_at", "updated_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner_id={self.owner_id})>"

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        """Check if this note is owned by the specified user."""
        return self.owner_id == user_id

    def has_tag(self, tag: str) -> bool:
        return tag in (self.tags or [])
