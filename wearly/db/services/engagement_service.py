"""Engagement store: like/save edges on content items and their counters."""

import logging
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.db.models import ContentItem, ContentKind, EngagementEdge, EngagementKind, Outfit
from wearly.db.services import content_service
from wearly.db.services.counters import adjust_counter
from wearly.lib.exceptions import InvalidOperation, backend_errors
from wearly.lib.results import ToggleResult

logger = logging.getLogger(__name__)

COUNTER_COLUMNS = {
    EngagementKind.LIKE: "likes_count",
    EngagementKind.SAVE: "saves_count",
}

# A unique-constraint race can only be lost once while holding the row lock
MAX_TOGGLE_ATTEMPTS = 2


def _edge_filter(content_id: UUID, kind: EngagementKind, actor_id: UUID):
    return and_(
        EngagementEdge.content_id == content_id,
        EngagementEdge.kind == kind.value,
        EngagementEdge.actor_id == actor_id,
    )


async def toggle(
    db_session: AsyncSession,
    item: ContentItem,
    kind: EngagementKind,
    actor_id: UUID,
) -> ToggleResult:
    """Flip the actor's like/save on ``item``.

    The edge write and the counter write commit together. The item row is
    locked first so concurrent toggles on the same item serialize.

    Raises:
        InvalidOperation: saving anything other than an outfit
    """
    if kind is EngagementKind.SAVE and not isinstance(item, Outfit):
        raise InvalidOperation("Only outfits can be saved")

    # Read before any rollback can expire the instance
    model = type(item)
    content_id = item.id
    content_kind = item.content_kind
    column = COUNTER_COLUMNS[kind]

    for attempt in range(1, MAX_TOGGLE_ATTEMPTS + 1):
        async with backend_errors(f"toggle_{kind.value}"):
            try:
                result = await _toggle_once(
                    db_session, model, content_id, content_kind, kind, actor_id, column
                )
                await db_session.commit()
                return result
            except IntegrityError:
                await db_session.rollback()
                if attempt == MAX_TOGGLE_ATTEMPTS:
                    raise
                logger.info(
                    "Concurrent %s insert on %s %s by %s, retrying",
                    kind.value, content_kind.value, content_id, actor_id,
                )
            except Exception:
                await db_session.rollback()
                raise


async def _toggle_once(
    db_session: AsyncSession,
    model: type,
    content_id: UUID,
    content_kind: ContentKind,
    kind: EngagementKind,
    actor_id: UUID,
    column: str,
) -> ToggleResult:
    await content_service.get_content(db_session, content_kind, content_id, for_update=True)

    deleted = await db_session.execute(
        delete(EngagementEdge).where(_edge_filter(content_id, kind, actor_id))
    )
    if deleted.rowcount:
        count = await adjust_counter(db_session, model, content_id, column, -1)
        return ToggleResult(active=False, count=count)

    db_session.add(
        EngagementEdge(
            content_kind=content_kind.value,
            content_id=content_id,
            kind=kind.value,
            actor_id=actor_id,
        )
    )
    await db_session.flush()
    count = await adjust_counter(db_session, model, content_id, column, 1)
    return ToggleResult(active=True, count=count)


async def has_engaged(
    db_session: AsyncSession,
    content_id: UUID,
    kind: EngagementKind,
    actor_id: UUID | None,
) -> bool:
    if actor_id is None:
        return False
    async with backend_errors("has_engaged"):
        result = await db_session.execute(
            select(EngagementEdge.id).where(_edge_filter(content_id, kind, actor_id))
        )
        return result.scalar_one_or_none() is not None


async def get_saved_outfits(
    db_session: AsyncSession,
    actor_id: UUID,
    limit: int = 20,
    offset: int = 0,
) -> list[Outfit]:
    """Outfits saved by the actor, most recently saved first.

    Outfits their owner has since made private are left out.
    """
    async with backend_errors("get_saved_outfits"):
        result = await db_session.execute(
            select(Outfit)
            .join(
                EngagementEdge,
                and_(
                    EngagementEdge.content_id == Outfit.id,
                    EngagementEdge.content_kind == ContentKind.OUTFIT.value,
                    EngagementEdge.kind == EngagementKind.SAVE.value,
                ),
            )
            .where(EngagementEdge.actor_id == actor_id)
            .where(or_(Outfit.is_public.is_(True), Outfit.user_id == actor_id))
            .order_by(EngagementEdge.created_at.desc(), EngagementEdge.id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
