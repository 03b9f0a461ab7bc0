"""Tests for the relationship store."""

import pytest
from sqlalchemy import update

from wearly.db.models import Follow, User
from wearly.db.services import follow_service, profile_service
from wearly.lib.exceptions import AlreadyExists, InvalidOperation, NotFound


async def _counts(db_session, user):
    stats = await profile_service.get_follow_stats(db_session, user.id)
    return stats.followers_count, stats.following_count


class TestFollow:
    @pytest.mark.asyncio
    async def test_follow_creates_edge_and_bumps_counters(self, db_session, alice, bob):
        edge = await follow_service.follow(db_session, bob.id, alice.id)

        assert edge.follower_id == bob.id
        assert edge.following_id == alice.id
        assert await follow_service.is_following(db_session, bob.id, alice.id)
        assert await _counts(db_session, alice) == (1, 0)
        assert await _counts(db_session, bob) == (0, 1)

    @pytest.mark.asyncio
    async def test_follow_is_directed(self, db_session, alice, bob):
        await follow_service.follow(db_session, bob.id, alice.id)

        assert not await follow_service.is_following(db_session, alice.id, bob.id)

    @pytest.mark.asyncio
    async def test_second_follow_raises_already_exists(self, db_session, alice, bob):
        await follow_service.follow(db_session, bob.id, alice.id)

        with pytest.raises(AlreadyExists):
            await follow_service.follow(db_session, bob.id, alice.id)

        assert await _counts(db_session, alice) == (1, 0)
        assert await _counts(db_session, bob) == (0, 1)

    @pytest.mark.asyncio
    async def test_self_follow_is_invalid(self, db_session, alice):
        with pytest.raises(InvalidOperation):
            await follow_service.follow(db_session, alice.id, alice.id)

        assert await _counts(db_session, alice) == (0, 0)


class TestUnfollow:
    @pytest.mark.asyncio
    async def test_unfollow_restores_counters(self, db_session, alice, bob):
        await follow_service.follow(db_session, bob.id, alice.id)
        await follow_service.unfollow(db_session, bob.id, alice.id)

        assert not await follow_service.is_following(db_session, bob.id, alice.id)
        assert await _counts(db_session, alice) == (0, 0)
        assert await _counts(db_session, bob) == (0, 0)

    @pytest.mark.asyncio
    async def test_unfollow_without_edge_raises_not_found(self, db_session, alice, bob):
        with pytest.raises(NotFound):
            await follow_service.unfollow(db_session, bob.id, alice.id)

    @pytest.mark.asyncio
    async def test_counters_never_go_negative(self, db_session, alice, bob):
        await follow_service.follow(db_session, bob.id, alice.id)
        # Simulate drift: counters already at zero while the edge still exists
        await db_session.execute(
            update(User).where(User.id.in_([alice.id, bob.id])).values(followers_count=0, following_count=0)
        )
        await db_session.commit()

        await follow_service.unfollow(db_session, bob.id, alice.id)

        assert await _counts(db_session, alice) == (0, 0)
        assert await _counts(db_session, bob) == (0, 0)


class TestIsFollowing:
    @pytest.mark.asyncio
    async def test_absent_actor_is_false(self, db_session, alice):
        assert await follow_service.is_following(db_session, None, alice.id) is False


class TestListing:
    @pytest.mark.asyncio
    async def test_followers_newest_first_with_pagination(self, db_session, make_user, alice, timestamps):
        fans = [await make_user(f"fan{i}") for i in range(3)]
        for fan, ts in zip(fans, timestamps):
            db_session.add(Follow(follower_id=fan.id, following_id=alice.id, created_at=ts))
        await db_session.commit()

        page = await follow_service.get_followers(db_session, alice.id, limit=2, offset=0)
        assert [entry.user.username for entry in page] == ["fan2", "fan1"]
        assert page[0].followed_at > page[1].followed_at

        rest = await follow_service.get_followers(db_session, alice.id, limit=2, offset=2)
        assert [entry.user.username for entry in rest] == ["fan0"]

    @pytest.mark.asyncio
    async def test_following_lists_followees(self, db_session, alice, bob, carol, timestamps):
        db_session.add(Follow(follower_id=carol.id, following_id=alice.id, created_at=timestamps[0]))
        db_session.add(Follow(follower_id=carol.id, following_id=bob.id, created_at=timestamps[1]))
        await db_session.commit()

        entries = await follow_service.get_following(db_session, carol.id)

        assert [entry.user.username for entry in entries] == ["bob", "alice"]
        assert entries[0].user.display_name == "Bob Chen"
