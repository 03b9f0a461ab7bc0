"""Notification fan-out for social events.

A follow, like, save or top-level comment produces one notification row for
the owner of the followed profile or engaged content. Fan-out runs after the
primary mutation has committed and is best-effort: any failure is logged and
swallowed so the caller still sees its mutation succeed. There is no dedup;
repeated events produce repeated notifications.

Usage:
    fanout = NotificationFanout(excerpt_length=50)
    await fanout.comment(db_session, recipient_id=owner_id, actor=profile,
                         target_kind=ContentKind.OUTFIT, target_id=outfit_id,
                         body="Love the jacket")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from wearly.db.models import ContentKind, NotificationKind
from wearly.db.services import notification_service
from wearly.lib import observability
from wearly.lib.hooks import NOTIFICATION_CREATED, NOTIFICATION_PRE_CREATE, hooks

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from wearly.db.models import Notification
    from wearly.lib.results import ProfileSummary

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_LENGTH = 50
ELLIPSIS = "..."

_CONTENT_NOUNS = {
    ContentKind.OUTFIT: "outfit",
    ContentKind.POST: "post",
}


@dataclass(frozen=True)
class NotificationDraft:
    """A notification about to be stored; filters may replace or drop it."""

    recipient_id: UUID
    kind: NotificationKind
    title: str
    message: str | None = None
    actor_id: UUID | None = None
    target_kind: ContentKind | None = None
    target_id: UUID | None = None


def excerpt(text: str, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """First ``length`` characters of ``text``, with an ellipsis when cut."""
    if len(text) <= length:
        return text
    return text[:length] + ELLIPSIS


def content_noun(kind: ContentKind | None) -> str:
    return _CONTENT_NOUNS.get(kind, "post") if kind is not None else "post"


class NotificationFanout:
    def __init__(self, excerpt_length: int = DEFAULT_EXCERPT_LENGTH) -> None:
        self.excerpt_length = excerpt_length

    async def notify(
        self,
        db_session: AsyncSession,
        recipient_id: UUID,
        kind: NotificationKind,
        title: str,
        message: str | None = None,
        *,
        actor_id: UUID | None = None,
        target_kind: ContentKind | None = None,
        target_id: UUID | None = None,
    ) -> Notification | None:
        """Record a notification. Never raises.

        Returns the stored row, or None when the event was a self-action,
        was dropped by a filter, or storing it failed.
        """
        if actor_id is not None and actor_id == recipient_id:
            return None

        draft = NotificationDraft(
            recipient_id=recipient_id,
            kind=kind,
            title=title,
            message=message,
            actor_id=actor_id,
            target_kind=target_kind,
            target_id=target_id,
        )

        with observability.span("notification.fanout", kind=kind.value):
            try:
                draft = await hooks.apply_filters(NOTIFICATION_PRE_CREATE, draft)
                if draft is None:
                    return None

                notification = await notification_service.create_notification(
                    db_session,
                    draft.recipient_id,
                    draft.kind,
                    draft.title,
                    draft.message,
                    actor_id=draft.actor_id,
                    target_kind=draft.target_kind.value if draft.target_kind else None,
                    target_id=draft.target_id,
                )
                await hooks.do_action(NOTIFICATION_CREATED, notification)
            except Exception as exc:
                logger.warning(
                    "Notification fan-out failed (kind=%s recipient=%s): %s",
                    kind.value, recipient_id, exc, exc_info=True,
                )
                return None

        return notification

    async def follow(self, db_session: AsyncSession, recipient_id: UUID, actor: ProfileSummary):
        return await self.notify(
            db_session,
            recipient_id,
            NotificationKind.FOLLOW,
            "started following you",
            f"{actor.display_name} started following you",
            actor_id=actor.id,
        )

    async def like(
        self,
        db_session: AsyncSession,
        recipient_id: UUID,
        actor: ProfileSummary,
        target_kind: ContentKind,
        target_id: UUID,
    ):
        noun = content_noun(target_kind)
        return await self.notify(
            db_session,
            recipient_id,
            NotificationKind.LIKE,
            f"liked your {noun}",
            f"{actor.display_name} liked your {noun}",
            actor_id=actor.id,
            target_kind=target_kind,
            target_id=target_id,
        )

    async def save(
        self,
        db_session: AsyncSession,
        recipient_id: UUID,
        actor: ProfileSummary,
        target_id: UUID,
    ):
        return await self.notify(
            db_session,
            recipient_id,
            NotificationKind.SAVE,
            "saved your outfit",
            f"{actor.display_name} saved your outfit",
            actor_id=actor.id,
            target_kind=ContentKind.OUTFIT,
            target_id=target_id,
        )

    async def comment(
        self,
        db_session: AsyncSession,
        recipient_id: UUID,
        actor: ProfileSummary,
        target_kind: ContentKind,
        target_id: UUID,
        body: str,
    ):
        return await self.notify(
            db_session,
            recipient_id,
            NotificationKind.COMMENT,
            f"commented on your {content_noun(target_kind)}",
            f'{actor.display_name} commented: "{excerpt(body, self.excerpt_length)}"',
            actor_id=actor.id,
            target_kind=target_kind,
            target_id=target_id,
        )
