"""Tests for the profile and content directories."""

import uuid

import pytest

from wearly.db.models import AccountKind, ContentKind, GeneralPost, Outfit, PostType
from wearly.db.services import content_service, profile_service
from wearly.lib.exceptions import InvalidOperation


class TestProfileService:
    @pytest.mark.asyncio
    async def test_create_user_defaults_to_regular_account(self, db_session):
        user = await profile_service.create_user(db_session, "dana", "Dana Reyes")

        assert user.account_kind == AccountKind.REGULAR.value
        assert user.followers_count == 0
        assert user.following_count == 0

    @pytest.mark.asyncio
    async def test_follow_stats_for_unknown_user(self, db_session):
        assert await profile_service.get_follow_stats(db_session, uuid.uuid4()) is None


class TestContentService:
    def test_parse_content_kind(self):
        assert content_service.parse_content_kind("outfit") is ContentKind.OUTFIT
        assert content_service.parse_content_kind(ContentKind.POST) is ContentKind.POST

    def test_parse_unknown_kind_raises(self):
        with pytest.raises(InvalidOperation):
            content_service.parse_content_kind("video")

    @pytest.mark.asyncio
    async def test_create_and_get_outfit(self, db_session, alice):
        outfit = await content_service.create_outfit(db_session, alice.id, "Linen suit", image_url="/img/1.jpg")

        loaded = await content_service.get_content(db_session, ContentKind.OUTFIT, outfit.id)

        assert isinstance(loaded, Outfit)
        assert loaded.title == "Linen suit"
        assert loaded.content_kind is ContentKind.OUTFIT
        assert (loaded.likes_count, loaded.saves_count, loaded.comments_count) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_create_and_get_general_post(self, db_session, alice):
        post = await content_service.create_general_post(
            db_session, alice.id, "Spring sale", body="All week", post_type=PostType.ANNOUNCEMENT
        )

        loaded = await content_service.get_content(db_session, ContentKind.POST, post.id, for_update=True)

        assert isinstance(loaded, GeneralPost)
        assert loaded.post_type == "announcement"
        assert loaded.content_kind is ContentKind.POST

    @pytest.mark.asyncio
    async def test_kind_mismatch_is_not_found(self, db_session, alice, make_outfit):
        outfit = await make_outfit(alice)

        assert await content_service.get_content(db_session, ContentKind.POST, outfit.id) is None
