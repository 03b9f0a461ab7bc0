"""Follow graph endpoints under /users."""

from uuid import UUID

from litestar import Controller, delete, get, post

from wearly.lib.engagement import EngagementFacade
from wearly.lib.results import FollowEntry, FollowStats


class UsersController(Controller):
    path = "/users"

    @post("/{user_id:uuid}/follow", status_code=201)
    async def follow(self, facade: EngagementFacade, actor_id: UUID | None, user_id: UUID) -> FollowStats:
        """Follow a user. Returns the followee's updated counters."""
        return await facade.follow(actor_id, user_id)

    @delete("/{user_id:uuid}/follow", status_code=200)
    async def unfollow(self, facade: EngagementFacade, actor_id: UUID | None, user_id: UUID) -> FollowStats:
        return await facade.unfollow(actor_id, user_id)

    @get("/{user_id:uuid}/follow")
    async def is_following(self, facade: EngagementFacade, actor_id: UUID | None, user_id: UUID) -> dict:
        return {"following": await facade.is_following(actor_id, user_id)}

    @get("/{user_id:uuid}/followers")
    async def followers(
        self,
        facade: EngagementFacade,
        user_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[FollowEntry]:
        return await facade.list_followers(user_id, limit, offset)

    @get("/{user_id:uuid}/following")
    async def following(
        self,
        facade: EngagementFacade,
        user_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[FollowEntry]:
        return await facade.list_following(user_id, limit, offset)

    @get("/{user_id:uuid}/stats")
    async def stats(self, facade: EngagementFacade, user_id: UUID) -> FollowStats:
        return await facade.get_follow_stats(user_id)
