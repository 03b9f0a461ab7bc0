"""Tests for the engagement store (likes and saves)."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError

from wearly.db.models import ContentKind, EngagementKind, Outfit
from wearly.db.services import content_service, engagement_service
from wearly.lib.exceptions import BackendUnavailable, InvalidOperation
from wearly.lib.results import ToggleResult


async def _load(db_session, summary):
    return await content_service.get_content(db_session, ContentKind(summary.content_kind), summary.id)


class TestToggle:
    @pytest.mark.asyncio
    async def test_first_toggle_likes_and_increments(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice)

        result = await engagement_service.toggle(
            db_session, await _load(db_session, outfit), EngagementKind.LIKE, bob.id
        )

        assert result.active is True
        assert result.count == 1
        assert await engagement_service.has_engaged(db_session, outfit.id, EngagementKind.LIKE, bob.id)

    @pytest.mark.asyncio
    async def test_second_toggle_unlikes_and_decrements(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice, likes_count=5)
        item = await _load(db_session, outfit)

        await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)
        result = await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)

        assert result.active is False
        assert result.count == 5
        assert not await engagement_service.has_engaged(db_session, outfit.id, EngagementKind.LIKE, bob.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("toggles, expected", [(1, 4), (2, 3), (3, 4), (4, 3)])
    async def test_parity_of_toggles_decides_count(self, db_session, alice, bob, make_outfit, toggles, expected):
        outfit = await make_outfit(alice, likes_count=3)
        item = await _load(db_session, outfit)

        for _ in range(toggles):
            result = await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)

        assert result.count == expected
        refreshed = await _load(db_session, outfit)
        assert refreshed.likes_count == expected

    @pytest.mark.asyncio
    async def test_decrement_is_floored_at_zero(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice)
        item = await _load(db_session, outfit)
        await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)
        # Counter drifted to zero while the edge survived
        await db_session.execute(update(Outfit).where(Outfit.id == outfit.id).values(likes_count=0))
        await db_session.commit()

        result = await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)

        assert result == ToggleResult(active=False, count=0)

    @pytest.mark.asyncio
    async def test_likes_and_saves_are_independent(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice)
        item = await _load(db_session, outfit)

        await engagement_service.toggle(db_session, item, EngagementKind.SAVE, bob.id)

        refreshed = await _load(db_session, outfit)
        assert refreshed.saves_count == 1
        assert refreshed.likes_count == 0
        assert await engagement_service.has_engaged(db_session, outfit.id, EngagementKind.SAVE, bob.id)
        assert not await engagement_service.has_engaged(db_session, outfit.id, EngagementKind.LIKE, bob.id)

    @pytest.mark.asyncio
    async def test_general_posts_can_be_liked(self, db_session, alice, bob, make_post):
        post = await make_post(alice)

        result = await engagement_service.toggle(
            db_session, await _load(db_session, post), EngagementKind.LIKE, bob.id
        )

        assert result.active is True
        assert result.count == 1

    @pytest.mark.asyncio
    async def test_general_posts_cannot_be_saved(self, db_session, alice, bob, make_post):
        post = await make_post(alice)

        with pytest.raises(InvalidOperation):
            await engagement_service.toggle(
                db_session, await _load(db_session, post), EngagementKind.SAVE, bob.id
            )

    @pytest.mark.asyncio
    async def test_failed_toggle_leaves_state_unchanged(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice, likes_count=2)
        item = await _load(db_session, outfit)

        with patch(
            "wearly.db.services.engagement_service.adjust_counter",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            with pytest.raises(RuntimeError):
                await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)

        assert not await engagement_service.has_engaged(db_session, outfit.id, EngagementKind.LIKE, bob.id)
        assert (await _load(db_session, outfit)).likes_count == 2

    @pytest.mark.asyncio
    async def test_lost_insert_race_is_retried(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice)
        item = await _load(db_session, outfit)
        real_toggle_once = engagement_service._toggle_once
        calls = []

        async def flaky(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise IntegrityError("INSERT", {}, Exception("duplicate key"))
            return await real_toggle_once(*args, **kwargs)

        with patch("wearly.db.services.engagement_service._toggle_once", side_effect=flaky):
            result = await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)

        assert len(calls) == 2
        assert result.active is True
        assert result.count == 1

    @pytest.mark.asyncio
    async def test_backend_errors_become_backend_unavailable(self, db_session, alice, bob, make_outfit):
        outfit = await make_outfit(alice)
        item = await _load(db_session, outfit)

        with patch(
            "wearly.db.services.engagement_service._toggle_once",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("connection refused"))),
        ):
            with pytest.raises(BackendUnavailable):
                await engagement_service.toggle(db_session, item, EngagementKind.LIKE, bob.id)


class TestReads:
    @pytest.mark.asyncio
    async def test_absent_actor_has_not_engaged(self, db_session, alice, make_outfit):
        outfit = await make_outfit(alice)

        assert await engagement_service.has_engaged(db_session, outfit.id, EngagementKind.LIKE, None) is False

    @pytest.mark.asyncio
    async def test_saved_outfits_newest_save_first(self, db_session, alice, bob, make_outfit):
        first = await make_outfit(alice, "First")
        second = await make_outfit(alice, "Second")
        for outfit in (first, second):
            await engagement_service.toggle(db_session, await _load(db_session, outfit), EngagementKind.SAVE, bob.id)

        saved = await engagement_service.get_saved_outfits(db_session, bob.id)

        assert {outfit.id for outfit in saved} == {first.id, second.id}
        assert await engagement_service.get_saved_outfits(db_session, alice.id) == []
