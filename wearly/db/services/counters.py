"""Denormalized counter maintenance.

Counters live on the user and content rows so that feeds never aggregate
edge tables. They are only changed here, always in SQL.
"""

import logging
from uuid import UUID

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.db.models import Comment, ContentKind, EngagementEdge, EngagementKind, Follow, GeneralPost, Outfit, User

logger = logging.getLogger(__name__)


async def adjust_counter(
    db_session: AsyncSession,
    model: type,
    row_id: UUID,
    column: str,
    delta: int,
) -> int:
    """Add ``delta`` to a denormalized counter in SQL and return the stored value.

    Decrements clamp at zero. The caller owns the transaction; nothing is
    committed here.
    """
    col = getattr(model, column)
    if delta >= 0:
        new_value = col + delta
    else:
        new_value = case((col + delta > 0, col + delta), else_=0)

    await db_session.execute(
        update(model)
        .where(model.id == row_id)
        .values({column: new_value})
        .execution_options(synchronize_session=False)
    )
    result = await db_session.execute(select(col).where(model.id == row_id))
    value = result.scalar_one_or_none()
    return value if value is not None else 0


def _edge_count(model: type, kind: ContentKind, engagement: EngagementKind):
    return (
        select(func.count(EngagementEdge.id))
        .where(
            and_(
                EngagementEdge.content_id == model.id,
                EngagementEdge.content_kind == kind.value,
                EngagementEdge.kind == engagement.value,
            )
        )
        .scalar_subquery()
    )


def _comment_count(model: type, kind: ContentKind):
    return (
        select(func.count(Comment.id))
        .where(and_(Comment.content_id == model.id, Comment.content_kind == kind.value))
        .scalar_subquery()
    )


def _recount_targets():
    return [
        (User, "followers_count",
         select(func.count(Follow.id)).where(Follow.following_id == User.id).scalar_subquery()),
        (User, "following_count",
         select(func.count(Follow.id)).where(Follow.follower_id == User.id).scalar_subquery()),
        (Outfit, "likes_count", _edge_count(Outfit, ContentKind.OUTFIT, EngagementKind.LIKE)),
        (Outfit, "saves_count", _edge_count(Outfit, ContentKind.OUTFIT, EngagementKind.SAVE)),
        (Outfit, "comments_count", _comment_count(Outfit, ContentKind.OUTFIT)),
        (GeneralPost, "likes_count", _edge_count(GeneralPost, ContentKind.POST, EngagementKind.LIKE)),
        (GeneralPost, "comments_count", _comment_count(GeneralPost, ContentKind.POST)),
    ]


async def recount_all(db_session: AsyncSession) -> dict[str, int]:
    """Recompute every denormalized counter from the edge tables.

    Returns the number of corrected rows per ``table.column``. Rows that were
    already right are not touched.
    """
    fixed: dict[str, int] = {}
    try:
        for model, column, actual in _recount_targets():
            col = getattr(model, column)
            result = await db_session.execute(
                update(model)
                .where(col != actual)
                .values({column: actual})
                .execution_options(synchronize_session=False)
            )
            key = f"{model.__tablename__}.{column}"
            fixed[key] = result.rowcount or 0
            if fixed[key]:
                logger.warning("Corrected %d drifted %s counters", fixed[key], key)
        await db_session.commit()
    except Exception:
        await db_session.rollback()
        raise
    return fixed
