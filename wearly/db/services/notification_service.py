"""Notification store: persistence, listing and read-marking."""

from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from wearly.db.models import Notification, NotificationKind, User
from wearly.lib.exceptions import NotFound, backend_errors
from wearly.lib.results import NotificationView


async def create_notification(
    db_session: AsyncSession,
    user_id: UUID,
    kind: NotificationKind,
    title: str,
    message: str | None = None,
    *,
    actor_id: UUID | None = None,
    target_kind: str | None = None,
    target_id: UUID | None = None,
) -> Notification:
    """Store a notification for ``user_id`` and commit."""
    notification = Notification(
        user_id=user_id,
        actor_id=actor_id,
        kind=NotificationKind(kind).value,
        title=title,
        message=message,
        target_kind=target_kind,
        target_id=target_id,
    )
    async with backend_errors("create_notification"):
        try:
            db_session.add(notification)
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise
    return notification


async def list_notifications(
    db_session: AsyncSession,
    user_id: UUID,
    limit: int = 50,
    unread_only: bool = False,
) -> list[NotificationView]:
    """Newest notifications first, each with the triggering actor's profile."""
    actor = aliased(User)
    query = (
        select(Notification, actor)
        .outerjoin(actor, actor.id == Notification.actor_id)
        .where(Notification.user_id == user_id)
    )
    if unread_only:
        query = query.where(Notification.read.is_(False))
    query = query.order_by(Notification.created_at.desc(), Notification.id).limit(limit)

    async with backend_errors("list_notifications"):
        result = await db_session.execute(query.execution_options(populate_existing=True))
        return [NotificationView.from_row(n, a) for n, a in result.all()]


async def mark_read(db_session: AsyncSession, user_id: UUID, notification_id: UUID) -> None:
    """Mark one of the user's notifications read.

    Raises:
        NotFound: no such notification for this user
    """
    async with backend_errors("mark_read"):
        try:
            result = await db_session.execute(
                update(Notification)
                .where(and_(Notification.id == notification_id, Notification.user_id == user_id))
                .values(read=True)
                .execution_options(synchronize_session=False)
            )
            if not result.rowcount:
                raise NotFound("Notification not found")
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise


async def mark_all_read(db_session: AsyncSession, user_id: UUID) -> int:
    """Mark every unread notification of the user read. Returns how many changed."""
    async with backend_errors("mark_all_read"):
        try:
            result = await db_session.execute(
                update(Notification)
                .where(and_(Notification.user_id == user_id, Notification.read.is_(False)))
                .values(read=True)
                .execution_options(synchronize_session=False)
            )
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise
    return result.rowcount or 0


async def count_unread(db_session: AsyncSession, user_id: UUID) -> int:
    async with backend_errors("count_unread"):
        result = await db_session.execute(
            select(func.count())
            .select_from(Notification)
            .where(and_(Notification.user_id == user_id, Notification.read.is_(False)))
        )
        return result.scalar() or 0
