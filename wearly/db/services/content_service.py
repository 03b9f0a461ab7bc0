"""Content directory: creation and lookup of outfits and general posts."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wearly.db.models import CONTENT_MODELS, ContentItem, ContentKind, GeneralPost, Outfit, PostType
from wearly.lib.exceptions import InvalidOperation, backend_errors


def parse_content_kind(value: str | ContentKind) -> ContentKind:
    """Coerce a path/query value into a ContentKind, rejecting unknown kinds."""
    try:
        return ContentKind(value)
    except ValueError:
        raise InvalidOperation(f"Unknown content kind: {value!r}") from None


async def get_content(
    db_session: AsyncSession,
    kind: ContentKind,
    content_id: UUID,
    *,
    for_update: bool = False,
) -> ContentItem | None:
    """Fetch a content item by kind and id.

    With ``for_update`` the row is locked until the surrounding transaction
    ends, serializing counter changes on the item.
    """
    model = CONTENT_MODELS[kind]
    query = select(model).where(model.id == content_id).execution_options(populate_existing=True)
    if for_update:
        query = query.with_for_update()
    async with backend_errors("get_content"):
        result = await db_session.execute(query)
        return result.scalar_one_or_none()


async def create_outfit(
    db_session: AsyncSession,
    user_id: UUID,
    title: str,
    description: str | None = None,
    image_url: str | None = None,
    is_public: bool = True,
) -> Outfit:
    outfit = Outfit(
        user_id=user_id,
        title=title,
        description=description,
        image_url=image_url,
        is_public=is_public,
    )
    async with backend_errors("create_outfit"):
        db_session.add(outfit)
        await db_session.commit()
        await db_session.refresh(outfit)
    return outfit


async def create_general_post(
    db_session: AsyncSession,
    user_id: UUID,
    title: str,
    body: str | None = None,
    post_type: PostType = PostType.GENERAL,
    image_url: str | None = None,
    is_public: bool = True,
) -> GeneralPost:
    post = GeneralPost(
        user_id=user_id,
        title=title,
        body=body,
        post_type=PostType(post_type).value,
        image_url=image_url,
        is_public=is_public,
    )
    async with backend_errors("create_general_post"):
        db_session.add(post)
        await db_session.commit()
        await db_session.refresh(post)
    return post
