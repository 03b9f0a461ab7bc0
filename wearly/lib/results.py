"""Plain result objects returned by the stores and the façade.

These are what UI collaborators receive as JSON; they never expose ORM rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from wearly.db.models import Comment, ContentItem, Notification, User


@dataclass
class ProfileSummary:
    id: UUID
    username: str
    full_name: str | None
    avatar_url: str | None
    account_kind: str
    display_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.display_name = self.full_name or self.username or "Someone"

    @classmethod
    def from_user(cls, user: User) -> ProfileSummary:
        return cls(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            avatar_url=user.avatar_url,
            account_kind=user.account_kind,
        )


@dataclass
class FollowEntry:
    """A profile in a followers/following list with the time of the follow."""

    user: ProfileSummary
    followed_at: datetime


@dataclass
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int


@dataclass
class ToggleResult:
    """Outcome of a like/save toggle: membership after the call and the new counter."""

    active: bool
    count: int


@dataclass
class EngagementState:
    content_id: UUID
    content_kind: str
    liked: bool
    saved: bool
    likes_count: int
    saves_count: int | None
    comments_count: int


@dataclass
class CommentView:
    id: UUID
    content_id: UUID
    content_kind: str
    body: str
    parent_id: UUID | None
    likes_count: int
    created_at: datetime
    author: ProfileSummary | None
    replies: list[CommentView] = field(default_factory=list)

    @classmethod
    def from_row(cls, comment: Comment, author: User | None) -> CommentView:
        return cls(
            id=comment.id,
            content_id=comment.content_id,
            content_kind=comment.content_kind,
            body=comment.body,
            parent_id=comment.parent_id,
            likes_count=comment.likes_count,
            created_at=comment.created_at,
            author=ProfileSummary.from_user(author) if author is not None else None,
        )


@dataclass
class NotificationView:
    id: UUID
    kind: str
    title: str
    message: str | None
    read: bool
    created_at: datetime
    actor: ProfileSummary | None
    target_kind: str | None
    target_id: UUID | None

    @classmethod
    def from_row(cls, notification: Notification, actor: User | None) -> NotificationView:
        return cls(
            id=notification.id,
            kind=notification.kind,
            title=notification.title,
            message=notification.message,
            read=notification.read,
            created_at=notification.created_at,
            actor=ProfileSummary.from_user(actor) if actor is not None else None,
            target_kind=notification.target_kind,
            target_id=notification.target_id,
        )


@dataclass
class ContentSummary:
    """Card-sized view of an outfit or general post."""

    id: UUID
    content_kind: str
    user_id: UUID
    title: str
    image_url: str | None
    likes_count: int
    saves_count: int | None
    comments_count: int
    created_at: datetime

    @classmethod
    def from_item(cls, item: ContentItem) -> ContentSummary:
        return cls(
            id=item.id,
            content_kind=item.content_kind.value,
            user_id=item.user_id,
            title=item.title,
            image_url=item.image_url,
            likes_count=item.likes_count,
            saves_count=getattr(item, "saves_count", None),
            comments_count=item.comments_count,
            created_at=item.created_at,
        )
