from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from wearly.db.base import Base


class EngagementKind(str, Enum):
    LIKE = "like"
    SAVE = "save"


class EngagementEdge(Base):
    """A like or save by one actor on one content item."""

    __tablename__ = "engagement_edges"
    __table_args__ = (
        UniqueConstraint("content_id", "kind", "actor_id", name="uq_engagement_edges_content_kind_actor"),
        Index("ix_engagement_edges_actor_kind_created", "actor_id", "kind", "created_at"),
    )

    # Polymorphic over outfits/general_posts, so no FK on content_id
    content_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    content_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    actor_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
