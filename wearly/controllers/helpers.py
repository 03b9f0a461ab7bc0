"""Shared dependencies for the JSON controllers."""

from uuid import UUID

from litestar import Request
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.auth.session_keys import SESSION_USER_ID
from wearly.config import EngagementConfig
from wearly.lib.engagement import EngagementFacade


def get_actor_id(request: Request) -> UUID | None:
    """Authenticated user id from the session, or None for anonymous callers."""
    raw = request.session.get(SESSION_USER_ID) if "session" in request.scope else None
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        return None


async def provide_actor_id(request: Request) -> UUID | None:
    return get_actor_id(request)


async def provide_facade(request: Request, db_session: AsyncSession) -> EngagementFacade:
    """Build the per-request engagement façade on the request's session."""
    settings = getattr(request.app.state, "settings", None)
    config = settings.engagement if settings is not None else EngagementConfig()
    return EngagementFacade(db_session, config)
