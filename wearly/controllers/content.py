"""Like, save and comment endpoints under /content/{kind}/{id}."""

from dataclasses import dataclass
from uuid import UUID

from litestar import Controller, get, post

from wearly.db.models import ContentKind
from wearly.db.services.content_service import parse_content_kind
from wearly.lib.engagement import EngagementFacade
from wearly.lib.exceptions import InvalidOperation
from wearly.lib.results import CommentView, ContentSummary, EngagementState, ToggleResult


@dataclass
class CommentCreate:
    body: str
    parent_id: UUID | None = None


class ContentController(Controller):
    path = "/content"

    @get("/saved")
    async def saved(
        self,
        facade: EngagementFacade,
        actor_id: UUID | None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ContentSummary]:
        """Outfits the signed-in user has saved, newest save first."""
        return await facade.list_saved_outfits(actor_id, limit, offset)

    @post("/{kind:str}/{content_id:uuid}/like", status_code=200)
    async def like(
        self, facade: EngagementFacade, actor_id: UUID | None, kind: str, content_id: UUID
    ) -> ToggleResult:
        return await facade.toggle_like(actor_id, kind, content_id)

    @post("/{kind:str}/{content_id:uuid}/save", status_code=200)
    async def save(
        self, facade: EngagementFacade, actor_id: UUID | None, kind: str, content_id: UUID
    ) -> ToggleResult:
        if parse_content_kind(kind) is not ContentKind.OUTFIT:
            raise InvalidOperation("Only outfits can be saved")
        return await facade.toggle_save(actor_id, content_id)

    @get("/{kind:str}/{content_id:uuid}/engagement")
    async def engagement(
        self, facade: EngagementFacade, actor_id: UUID | None, kind: str, content_id: UUID
    ) -> EngagementState:
        return await facade.get_engagement_state(actor_id, kind, content_id)

    @get("/{kind:str}/{content_id:uuid}/comments")
    async def comments(
        self, facade: EngagementFacade, actor_id: UUID | None, kind: str, content_id: UUID
    ) -> list[CommentView]:
        return await facade.list_comments(kind, content_id, actor_id)

    @post("/{kind:str}/{content_id:uuid}/comments", status_code=201)
    async def add_comment(
        self,
        facade: EngagementFacade,
        actor_id: UUID | None,
        kind: str,
        content_id: UUID,
        data: CommentCreate,
    ) -> CommentView:
        return await facade.add_comment(actor_id, kind, content_id, data.body, data.parent_id)
