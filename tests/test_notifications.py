"""Tests for notification fan-out."""

from dataclasses import replace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from wearly.db.models import ContentKind, NotificationKind
from wearly.db.services import notification_service
from wearly.lib.hooks import NOTIFICATION_CREATED, NOTIFICATION_PRE_CREATE, hooks
from wearly.lib.notifications import NotificationDraft, NotificationFanout, content_noun, excerpt


@pytest.fixture
def fanout():
    return NotificationFanout()


class TestExcerpt:
    def test_short_text_is_unchanged(self):
        assert excerpt("Nice fit") == "Nice fit"

    def test_text_at_limit_is_unchanged(self):
        assert excerpt("x" * 50) == "x" * 50

    def test_long_text_is_cut_with_ellipsis(self):
        body = "abcdefghij" * 8
        assert excerpt(body) == body[:50] + "..."

    def test_custom_length(self):
        assert excerpt("abcdef", 3) == "abc..."


class TestContentNoun:
    def test_nouns(self):
        assert content_noun(ContentKind.OUTFIT) == "outfit"
        assert content_noun(ContentKind.POST) == "post"
        assert content_noun(None) == "post"


class TestMessages:
    @pytest.mark.asyncio
    async def test_follow(self, fanout, db_session, alice, bob):
        notification = await fanout.follow(db_session, alice.id, bob)

        assert notification.kind == NotificationKind.FOLLOW.value
        assert notification.title == "started following you"
        assert notification.message == "Bob Chen started following you"
        assert notification.actor_id == bob.id
        assert notification.target_id is None

    @pytest.mark.asyncio
    async def test_like_names_the_content_kind(self, fanout, db_session, alice, carol):
        target_id = uuid4()
        notification = await fanout.like(db_session, alice.id, carol, ContentKind.POST, target_id)

        assert notification.title == "liked your post"
        # carol has no full name, so the username is shown
        assert notification.message == "carol liked your post"
        assert notification.target_kind == "post"
        assert notification.target_id == target_id

    @pytest.mark.asyncio
    async def test_save(self, fanout, db_session, alice, bob):
        notification = await fanout.save(db_session, alice.id, bob, uuid4())

        assert notification.title == "saved your outfit"
        assert notification.message == "Bob Chen saved your outfit"
        assert notification.target_kind == "outfit"

    @pytest.mark.asyncio
    async def test_comment_quotes_excerpt(self, fanout, db_session, alice, bob):
        body = "0123456789" * 8
        notification = await fanout.comment(db_session, alice.id, bob, ContentKind.OUTFIT, uuid4(), body)

        assert notification.title == "commented on your outfit"
        assert notification.message == f'Bob Chen commented: "{body[:50]}..."'

    @pytest.mark.asyncio
    async def test_comment_excerpt_length_is_configurable(self, db_session, alice, bob):
        notification = await NotificationFanout(excerpt_length=5).comment(
            db_session, alice.id, bob, ContentKind.OUTFIT, uuid4(), "Gorgeous colours"
        )

        assert notification.message == 'Bob Chen commented: "Gorge..."'


class TestBestEffort:
    @pytest.mark.asyncio
    async def test_self_notification_is_suppressed(self, fanout, db_session, alice):
        assert await fanout.follow(db_session, alice.id, alice) is None
        assert await notification_service.count_unread(db_session, alice.id) == 0

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed_and_logged(self, fanout, db_session, alice, bob, caplog):
        with patch(
            "wearly.lib.notifications.notification_service.create_notification",
            AsyncMock(side_effect=RuntimeError("db down")),
        ):
            with caplog.at_level("WARNING", logger="wearly.lib.notifications"):
                result = await fanout.follow(db_session, alice.id, bob)

        assert result is None
        assert "Notification fan-out failed" in caplog.text

    @pytest.mark.asyncio
    async def test_no_dedup_for_repeated_events(self, fanout, db_session, alice, bob):
        await fanout.follow(db_session, alice.id, bob)
        await fanout.follow(db_session, alice.id, bob)

        assert await notification_service.count_unread(db_session, alice.id) == 2


class TestHooks:
    @pytest.mark.asyncio
    async def test_pre_create_filter_can_rewrite(self, fanout, db_session, alice, bob):
        def shout(draft: NotificationDraft):
            return replace(draft, title=draft.title.upper())

        hooks.add_filter(NOTIFICATION_PRE_CREATE, shout)

        notification = await fanout.follow(db_session, alice.id, bob)

        assert notification.title == "STARTED FOLLOWING YOU"

    @pytest.mark.asyncio
    async def test_pre_create_filter_can_veto(self, fanout, db_session, alice, bob):
        hooks.add_filter(NOTIFICATION_PRE_CREATE, lambda draft: None)

        assert await fanout.follow(db_session, alice.id, bob) is None
        assert await notification_service.count_unread(db_session, alice.id) == 0

    @pytest.mark.asyncio
    async def test_created_action_receives_row(self, fanout, db_session, alice, bob):
        seen = []

        async def record(notification):
            seen.append(notification.id)

        hooks.add_action(NOTIFICATION_CREATED, record)

        notification = await fanout.follow(db_session, alice.id, bob)

        assert seen == [notification.id]

    @pytest.mark.asyncio
    async def test_failing_action_does_not_raise(self, fanout, db_session, alice, bob):
        def explode(notification):
            raise ValueError("push gateway down")

        hooks.add_action(NOTIFICATION_CREATED, explode)

        assert await fanout.follow(db_session, alice.id, bob) is None
        # The row itself was committed before the action ran
        assert await notification_service.count_unread(db_session, alice.id) == 1
