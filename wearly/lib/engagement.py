"""Engagement façade: the public API of the social graph and engagement layer.

The façade resolves the actor and the target, runs the store mutation in its
own transaction, then fans out a notification once that transaction has
committed. It is the only place that knows about cross-store sequencing and
the only place self-follow and self-notification guards live.

Mutations without an actor raise :class:`Unauthorized`; reads without an
actor return the "not engaged" default instead.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from wearly.config import EngagementConfig
from wearly.db.models import ContentItem, ContentKind, EngagementKind, User
from wearly.db.services import (
    comment_service,
    content_service,
    engagement_service,
    follow_service,
    notification_service,
    profile_service,
)
from wearly.lib import observability
from wearly.lib.exceptions import InvalidOperation, NotFound, Unauthorized
from wearly.lib.notifications import NotificationFanout
from wearly.lib.results import (
    CommentView,
    ContentSummary,
    EngagementState,
    FollowEntry,
    FollowStats,
    NotificationView,
    ProfileSummary,
    ToggleResult,
)


class EngagementFacade:
    """Per-request entry point bound to one database session."""

    def __init__(
        self,
        db_session: AsyncSession,
        config: EngagementConfig | None = None,
        fanout: NotificationFanout | None = None,
    ) -> None:
        self.db_session = db_session
        self.config = config or EngagementConfig()
        self.fanout = fanout or NotificationFanout(self.config.comment_excerpt_length)

    # -- helpers ---------------------------------------------------------

    def _page(self, limit: int | None, offset: int | None, default: int | None = None) -> tuple[int, int]:
        if limit is None:
            limit = default or self.config.default_page_size
        limit = max(1, min(limit, self.config.max_page_size))
        return limit, max(0, offset or 0)

    async def _require_actor(self, actor_id: UUID | None) -> User:
        if actor_id is None:
            raise Unauthorized("Sign in required")
        actor = await profile_service.get_user(self.db_session, actor_id)
        if actor is None:
            raise Unauthorized("Unknown actor")
        return actor

    async def _require_user(self, user_id: UUID) -> User:
        user = await profile_service.get_user(self.db_session, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def _require_content(
        self, kind: ContentKind | str, content_id: UUID, actor_id: UUID | None = None
    ) -> ContentItem:
        """Load a content item the actor may see. Private items are visible to their owner only."""
        kind = content_service.parse_content_kind(kind)
        item = await content_service.get_content(self.db_session, kind, content_id)
        if item is None or (not item.is_public and item.user_id != actor_id):
            raise NotFound(f"{kind.value.capitalize()} not found")
        return item

    async def _follow_stats(self, user_id: UUID) -> FollowStats:
        stats = await profile_service.get_follow_stats(self.db_session, user_id)
        if stats is None:
            raise NotFound("User not found")
        return stats

    # -- relationships ---------------------------------------------------

    @observability.traced("engagement.follow")
    async def follow(self, actor_id: UUID | None, user_id: UUID) -> FollowStats:
        """Follow ``user_id`` and notify them. Returns the followee's new counters."""
        actor = ProfileSummary.from_user(await self._require_actor(actor_id))
        if actor.id == user_id:
            raise InvalidOperation("Users cannot follow themselves")
        await self._require_user(user_id)

        await follow_service.follow(self.db_session, actor.id, user_id)
        await self.fanout.follow(self.db_session, user_id, actor)

        return await self._follow_stats(user_id)

    @observability.traced("engagement.unfollow")
    async def unfollow(self, actor_id: UUID | None, user_id: UUID) -> FollowStats:
        actor = await self._require_actor(actor_id)
        await self._require_user(user_id)
        await follow_service.unfollow(self.db_session, actor.id, user_id)
        return await self._follow_stats(user_id)

    @observability.traced("engagement.is_following")
    async def is_following(self, actor_id: UUID | None, user_id: UUID) -> bool:
        return await follow_service.is_following(self.db_session, actor_id, user_id)

    @observability.traced("engagement.list_followers")
    async def list_followers(
        self, user_id: UUID, limit: int | None = None, offset: int | None = 0
    ) -> list[FollowEntry]:
        limit, offset = self._page(limit, offset)
        return await follow_service.get_followers(self.db_session, user_id, limit, offset)

    @observability.traced("engagement.list_following")
    async def list_following(
        self, user_id: UUID, limit: int | None = None, offset: int | None = 0
    ) -> list[FollowEntry]:
        limit, offset = self._page(limit, offset)
        return await follow_service.get_following(self.db_session, user_id, limit, offset)

    @observability.traced("engagement.get_follow_stats")
    async def get_follow_stats(self, user_id: UUID) -> FollowStats:
        return await self._follow_stats(user_id)

    # -- likes & saves ---------------------------------------------------

    async def _toggle(
        self,
        actor_id: UUID | None,
        kind: ContentKind | str,
        content_id: UUID,
        engagement: EngagementKind,
    ) -> ToggleResult:
        actor = ProfileSummary.from_user(await self._require_actor(actor_id))
        item = await self._require_content(kind, content_id, actor.id)
        owner_id = item.user_id
        content_kind = item.content_kind

        result = await engagement_service.toggle(self.db_session, item, engagement, actor.id)

        if result.active and owner_id != actor.id:
            if engagement is EngagementKind.LIKE:
                await self.fanout.like(self.db_session, owner_id, actor, content_kind, content_id)
            else:
                await self.fanout.save(self.db_session, owner_id, actor, content_id)
        return result

    @observability.traced("engagement.toggle_like")
    async def toggle_like(
        self, actor_id: UUID | None, kind: ContentKind | str, content_id: UUID
    ) -> ToggleResult:
        """Like or unlike a content item. Only a new like notifies the owner."""
        return await self._toggle(actor_id, kind, content_id, EngagementKind.LIKE)

    @observability.traced("engagement.toggle_save")
    async def toggle_save(self, actor_id: UUID | None, outfit_id: UUID) -> ToggleResult:
        """Save or unsave an outfit. Only a new save notifies the owner."""
        return await self._toggle(actor_id, ContentKind.OUTFIT, outfit_id, EngagementKind.SAVE)

    @observability.traced("engagement.is_liked")
    async def is_liked(self, actor_id: UUID | None, content_id: UUID) -> bool:
        return await engagement_service.has_engaged(
            self.db_session, content_id, EngagementKind.LIKE, actor_id
        )

    @observability.traced("engagement.is_saved")
    async def is_saved(self, actor_id: UUID | None, content_id: UUID) -> bool:
        return await engagement_service.has_engaged(
            self.db_session, content_id, EngagementKind.SAVE, actor_id
        )

    @observability.traced("engagement.get_engagement_state")
    async def get_engagement_state(
        self, actor_id: UUID | None, kind: ContentKind | str, content_id: UUID
    ) -> EngagementState:
        item = await self._require_content(kind, content_id, actor_id)
        liked = await engagement_service.has_engaged(
            self.db_session, item.id, EngagementKind.LIKE, actor_id
        )
        saved = False
        if item.content_kind is ContentKind.OUTFIT:
            saved = await engagement_service.has_engaged(
                self.db_session, item.id, EngagementKind.SAVE, actor_id
            )
        return EngagementState(
            content_id=item.id,
            content_kind=item.content_kind.value,
            liked=liked,
            saved=saved,
            likes_count=item.likes_count,
            saves_count=getattr(item, "saves_count", None),
            comments_count=item.comments_count,
        )

    @observability.traced("engagement.list_saved_outfits")
    async def list_saved_outfits(
        self, actor_id: UUID | None, limit: int | None = None, offset: int | None = 0
    ) -> list[ContentSummary]:
        if actor_id is None:
            return []
        limit, offset = self._page(limit, offset)
        outfits = await engagement_service.get_saved_outfits(self.db_session, actor_id, limit, offset)
        return [ContentSummary.from_item(outfit) for outfit in outfits]

    # -- comments --------------------------------------------------------

    @observability.traced("engagement.add_comment")
    async def add_comment(
        self,
        actor_id: UUID | None,
        kind: ContentKind | str,
        content_id: UUID,
        body: str,
        parent_id: UUID | None = None,
    ) -> CommentView:
        """Comment on a content item, or reply to a top-level comment.

        Only top-level comments notify the content owner.
        """
        author = await self._require_actor(actor_id)
        actor = ProfileSummary.from_user(author)
        item = await self._require_content(kind, content_id, actor.id)
        owner_id = item.user_id
        content_kind = item.content_kind

        view = await comment_service.add_comment(self.db_session, item, author, body, parent_id)

        if parent_id is None and owner_id != actor.id:
            await self.fanout.comment(
                self.db_session, owner_id, actor, content_kind, content_id, view.body
            )
        return view

    @observability.traced("engagement.list_comments")
    async def list_comments(
        self, kind: ContentKind | str, content_id: UUID, actor_id: UUID | None = None
    ) -> list[CommentView]:
        item = await self._require_content(kind, content_id, actor_id)
        return await comment_service.list_comments(self.db_session, item.content_kind, item.id)

    # -- notifications ---------------------------------------------------

    @observability.traced("engagement.list_notifications")
    async def list_notifications(
        self, actor_id: UUID | None, limit: int | None = None, unread_only: bool = False
    ) -> list[NotificationView]:
        if actor_id is None:
            return []
        limit, _ = self._page(limit, 0, default=self.config.notifications_limit)
        return await notification_service.list_notifications(
            self.db_session, actor_id, limit, unread_only
        )

    @observability.traced("engagement.count_unread_notifications")
    async def count_unread_notifications(self, actor_id: UUID | None) -> int:
        if actor_id is None:
            return 0
        return await notification_service.count_unread(self.db_session, actor_id)

    @observability.traced("engagement.mark_notification_read")
    async def mark_notification_read(self, actor_id: UUID | None, notification_id: UUID) -> None:
        actor = await self._require_actor(actor_id)
        await notification_service.mark_read(self.db_session, actor.id, notification_id)

    @observability.traced("engagement.mark_all_notifications_read")
    async def mark_all_notifications_read(self, actor_id: UUID | None) -> int:
        actor = await self._require_actor(actor_id)
        return await notification_service.mark_all_read(self.db_session, actor.id)
