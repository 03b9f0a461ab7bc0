"""Comment store: one-level threaded comments on content items."""

from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.db.models import Comment, ContentItem, ContentKind, User
from wearly.db.services import content_service
from wearly.db.services.counters import adjust_counter
from wearly.lib.exceptions import InvalidOperation, NotFound, backend_errors
from wearly.lib.results import CommentView


async def get_comment(db_session: AsyncSession, comment_id: UUID) -> Comment | None:
    async with backend_errors("get_comment"):
        result = await db_session.execute(select(Comment).where(Comment.id == comment_id))
        return result.scalar_one_or_none()


async def add_comment(
    db_session: AsyncSession,
    item: ContentItem,
    author: User,
    body: str,
    parent_id: UUID | None = None,
) -> CommentView:
    """Insert a comment (or a reply) and bump the item's comments_count.

    The body is stored as written; whitespace-only bodies are rejected.

    Raises:
        InvalidOperation: empty body, or replying to a reply
        NotFound: the parent comment does not exist on this item
    """
    body = body or ""
    if not body.strip():
        raise InvalidOperation("Comment body cannot be empty")

    model = type(item)
    content_id = item.id
    content_kind = item.content_kind

    async with backend_errors("add_comment"):
        try:
            await content_service.get_content(db_session, content_kind, content_id, for_update=True)

            if parent_id is not None:
                parent = await get_comment(db_session, parent_id)
                if (
                    parent is None
                    or parent.content_id != content_id
                    or parent.content_kind != content_kind.value
                ):
                    raise NotFound("Parent comment not found")
                if parent.parent_id is not None:
                    raise InvalidOperation("Replies can only be made to top-level comments")

            comment = Comment(
                content_kind=content_kind.value,
                content_id=content_id,
                user_id=author.id,
                body=body,
                parent_id=parent_id,
            )
            db_session.add(comment)
            await db_session.flush()
            await adjust_counter(db_session, model, content_id, "comments_count", 1)
            view = CommentView.from_row(comment, author)
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    return view


async def list_comments(
    db_session: AsyncSession,
    kind: ContentKind,
    content_id: UUID,
) -> list[CommentView]:
    """Top-level comments oldest first, each with its replies oldest first."""
    async with backend_errors("list_comments"):
        result = await db_session.execute(
            select(Comment, User)
            .outerjoin(User, User.id == Comment.user_id)
            .where(and_(Comment.content_kind == kind.value, Comment.content_id == content_id))
            .order_by(Comment.created_at.asc(), Comment.id)
        )
        rows = result.all()

    top_level: list[CommentView] = []
    by_id: dict[UUID, CommentView] = {}
    replies: list[CommentView] = []
    for comment, author in rows:
        view = CommentView.from_row(comment, author)
        if comment.parent_id is None:
            top_level.append(view)
            by_id[view.id] = view
        else:
            replies.append(view)

    for reply in replies:
        parent = by_id.get(reply.parent_id)
        if parent is not None:
            parent.replies.append(reply)

    return top_level
