"""Relationship store: directed follow edges and the follower/following counters."""

from uuid import UUID

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.db.models import Follow, User
from wearly.db.services.counters import adjust_counter
from wearly.lib.exceptions import AlreadyExists, InvalidOperation, NotFound, backend_errors
from wearly.lib.results import FollowEntry, ProfileSummary


def _edge_filter(follower_id: UUID, following_id: UUID):
    return and_(Follow.follower_id == follower_id, Follow.following_id == following_id)


async def follow(db_session: AsyncSession, follower_id: UUID, following_id: UUID) -> Follow:
    """Create a follow edge and bump both counters in one transaction.

    Raises:
        InvalidOperation: follower and followee are the same user
        AlreadyExists: the edge is already present
    """
    if follower_id == following_id:
        raise InvalidOperation("Users cannot follow themselves")

    async with backend_errors("follow"):
        try:
            if await is_following(db_session, follower_id, following_id):
                raise AlreadyExists("Already following this user")

            edge = Follow(follower_id=follower_id, following_id=following_id)
            db_session.add(edge)
            await db_session.flush()

            await adjust_counter(db_session, User, following_id, "followers_count", 1)
            await adjust_counter(db_session, User, follower_id, "following_count", 1)
            await db_session.commit()
        except IntegrityError:
            await db_session.rollback()
            # Lost a race against an identical follow
            if await is_following(db_session, follower_id, following_id):
                raise AlreadyExists("Already following this user") from None
            raise
        except Exception:
            await db_session.rollback()
            raise

    return edge


async def unfollow(db_session: AsyncSession, follower_id: UUID, following_id: UUID) -> None:
    """Delete a follow edge and decrement both counters (never below zero).

    Raises:
        NotFound: there is no such edge
    """
    async with backend_errors("unfollow"):
        try:
            result = await db_session.execute(
                delete(Follow).where(_edge_filter(follower_id, following_id))
            )
            if not result.rowcount:
                raise NotFound("Not following this user")

            await adjust_counter(db_session, User, following_id, "followers_count", -1)
            await adjust_counter(db_session, User, follower_id, "following_count", -1)
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise


async def is_following(db_session: AsyncSession, follower_id: UUID | None, following_id: UUID) -> bool:
    if follower_id is None:
        return False
    async with backend_errors("is_following"):
        result = await db_session.execute(
            select(Follow.id).where(_edge_filter(follower_id, following_id))
        )
        return result.scalar_one_or_none() is not None


async def get_followers(
    db_session: AsyncSession,
    user_id: UUID,
    limit: int = 20,
    offset: int = 0,
) -> list[FollowEntry]:
    """Users following ``user_id``, most recent follow first."""
    async with backend_errors("get_followers"):
        result = await db_session.execute(
            select(User, Follow.created_at)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id)
            .offset(offset)
            .limit(limit)
        )
        return [
            FollowEntry(user=ProfileSummary.from_user(user), followed_at=created_at)
            for user, created_at in result.all()
        ]


async def get_following(
    db_session: AsyncSession,
    user_id: UUID,
    limit: int = 20,
    offset: int = 0,
) -> list[FollowEntry]:
    """Users ``user_id`` follows, most recent follow first."""
    async with backend_errors("get_following"):
        result = await db_session.execute(
            select(User, Follow.created_at)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id)
            .offset(offset)
            .limit(limit)
        )
        return [
            FollowEntry(user=ProfileSummary.from_user(user), followed_at=created_at)
            for user, created_at in result.all()
        ]
