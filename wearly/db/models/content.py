from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wearly.db.base import Base


class ContentKind(str, Enum):
    OUTFIT = "outfit"
    POST = "post"


class PostType(str, Enum):
    NEWS = "news"
    ANNOUNCEMENT = "announcement"
    PHOTO = "photo"
    EVENT = "event"
    GENERAL = "general"


class Outfit(Base):
    """An outfit shared by a user; the only content that can be saved."""

    __tablename__ = "outfits"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Denormalized counters
    likes_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    saves_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    content_kind = ContentKind.OUTFIT


class GeneralPost(Base):
    """A news/announcement/event style post, typically from company accounts."""

    __tablename__ = "general_posts"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    post_type: Mapped[str] = mapped_column(String(20), nullable=False, default=PostType.GENERAL.value)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Denormalized counters
    likes_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    content_kind = ContentKind.POST


ContentItem = Outfit | GeneralPost

CONTENT_MODELS: dict[ContentKind, type[Outfit] | type[GeneralPost]] = {
    ContentKind.OUTFIT: Outfit,
    ContentKind.POST: GeneralPost,
}
