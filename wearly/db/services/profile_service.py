"""Profile directory: read-only lookups of user identity for display."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.db.models import AccountKind, User
from wearly.lib.exceptions import backend_errors
from wearly.lib.results import FollowStats


async def get_user(db_session: AsyncSession, user_id: UUID) -> User | None:
    async with backend_errors("get_user"):
        result = await db_session.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


async def get_follow_stats(db_session: AsyncSession, user_id: UUID) -> FollowStats | None:
    user = await get_user(db_session, user_id)
    if not user:
        return None
    return FollowStats(
        user_id=user.id,
        followers_count=user.followers_count,
        following_count=user.following_count,
    )


async def create_user(
    db_session: AsyncSession,
    username: str,
    full_name: str | None = None,
    avatar_url: str | None = None,
    account_kind: AccountKind = AccountKind.REGULAR,
) -> User:
    """Create a profile row.

    Accounts are provisioned by the identity provider; this exists for
    seeding and tests.
    """
    user = User(
        username=username,
        full_name=full_name,
        avatar_url=avatar_url,
        account_kind=AccountKind(account_kind).value,
    )
    async with backend_errors("create_user"):
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
    return user
