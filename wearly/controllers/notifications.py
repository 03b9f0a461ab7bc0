"""Notification inbox endpoints."""

from uuid import UUID

from litestar import Controller, get, post

from wearly.lib.engagement import EngagementFacade
from wearly.lib.results import NotificationView


class NotificationsController(Controller):
    path = "/notifications"

    @get("/")
    async def index(
        self,
        facade: EngagementFacade,
        actor_id: UUID | None,
        limit: int | None = None,
        unread: bool = False,
    ) -> list[NotificationView]:
        """The signed-in user's notifications, newest first."""
        return await facade.list_notifications(actor_id, limit, unread_only=unread)

    @get("/unread-count")
    async def unread_count(self, facade: EngagementFacade, actor_id: UUID | None) -> dict:
        return {"count": await facade.count_unread_notifications(actor_id)}

    @post("/read-all", status_code=200)
    async def read_all(self, facade: EngagementFacade, actor_id: UUID | None) -> dict:
        return {"updated": await facade.mark_all_notifications_read(actor_id)}

    @post("/{notification_id:uuid}/read", status_code=200)
    async def read(self, facade: EngagementFacade, actor_id: UUID | None, notification_id: UUID) -> dict:
        await facade.mark_notification_read(actor_id, notification_id)
        return {"id": str(notification_id), "read": True}
