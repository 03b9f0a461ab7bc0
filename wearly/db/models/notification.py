from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from wearly.db.base import Base


class NotificationKind(str, Enum):
    FOLLOW = "follow"
    LIKE = "like"
    COMMENT = "comment"
    SAVE = "save"


class Notification(Base):
    """Durable notification addressed to one recipient."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_created", "user_id", "created_at"),
        Index("ix_notifications_user_read", "user_id", "read"),
    )

    # Recipient
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Who triggered it; kept when the actor account is removed
    actor_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), nullable=False)

    target_kind: Mapped[str | None] = mapped_column(String(20), nullable=True)
    target_id: Mapped[UUID | None] = mapped_column(nullable=True)
