from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wearly.db.base import Base


class Comment(Base):
    """Comment on an outfit or general post; replies nest one level deep."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_content_created", "content_kind", "content_id", "created_at"),
    )

    content_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    content_id: Mapped[UUID] = mapped_column(nullable=False)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)

    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )

    likes_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
