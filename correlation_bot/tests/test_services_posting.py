from datetime import date
from pathlib import Path

import pytest

from correlation_bot.config import AppConfig
from correlation_bot.context import AppContext
from correlation_bot.mention import Identity
from correlation_bot.models import NEED, RESOURCE, OwnerState, StoredItem
from correlation_bot.services import posting
from correlation_bot.services.quota import consume_post_quota, release_post_quota
from correlation_bot.services.telegram import BotMessageEditor, identity_resolver
from correlation_bot.store import ItemStore
from correlation_bot.texts import Locale

from .fakes import FakeBot, FakeConn, FakePool, FakeUser, make_bad_request


def build_context() -> AppContext:
    pool = FakePool(FakeConn())
    config = AppConfig(
        bot_token="token",
        channel_id=-100,
        admin_ids=[1],
        migrations_dir=Path("."),
        db_dsn="dsn",
        locale=Locale("en"),
    )
    return AppContext(bot=FakeBot(), pool=pool, config=config, store=ItemStore(pool))


def test_compose_channel_text_quotes_description() -> None:
    mention = '<a href="tg://user?id=1">A</a>'
    assert posting.compose_channel_text(NEED, mention, "a & b", Locale("en")) == f"New need from {mention}:\na &amp; b"
    assert posting.compose_channel_text(RESOURCE, mention, "x", Locale("ru")) == f"Новый ресурс от {mention}:\nx"


def test_caption_less_photo_texts() -> None:
    mention = '<a href="tg://user?id=1">A</a>'
    item = StoredItem(owner_id=1, kind=NEED, description="", photo_file_id="p")

    assert posting.compose_channel_text(NEED, mention, "", Locale("en")) == f"New need from {mention}:"
    assert posting.item_summary(item, Locale("ru")) == "(фото)"
    assert posting.item_summary(StoredItem(owner_id=1, kind=NEED, description="a<b"), Locale("en")) == "a&lt;b"


@pytest.mark.asyncio
async def test_publish_sets_channel_reference() -> None:
    context = build_context()
    item = StoredItem(owner_id=1, kind=NEED, description="bread")

    assert await posting.publish_item(context, item, Identity(id=1, first_name="A"))

    assert item.channel_chat_id == -100
    assert item.channel_message_id == 101
    assert context.bot.sent[0]["parse_mode"] == "HTML"


@pytest.mark.asyncio
async def test_publish_failure_keeps_snapshot() -> None:
    context = build_context()
    context.bot.send_error = make_bad_request("Bad Request: not enough rights")
    item = StoredItem(owner_id=1, kind=NEED, description="bread", channel_chat_id=-100, channel_message_id=5)

    assert not await posting.publish_item(context, item, Identity(id=1))

    assert not item.has_channel_post
    assert item.user == Identity(id=1)


@pytest.mark.asyncio
async def test_delete_without_post_is_noop() -> None:
    context = build_context()
    item = StoredItem(owner_id=1, kind=NEED, description="bread")

    await posting.delete_item_post(context, item)

    assert context.bot.deleted == []


def test_quota_resets_on_new_day() -> None:
    state = OwnerState(owner_id=1, posts_today=3, posts_day=date(2024, 1, 1))

    assert consume_post_quota(state, date(2024, 1, 2), limit=3)
    assert state.posts_today == 1
    assert state.posts_day == date(2024, 1, 2)


def test_quota_refuses_when_used_up() -> None:
    state = OwnerState(owner_id=1)
    day = date(2024, 1, 1)

    assert consume_post_quota(state, day, limit=2)
    assert consume_post_quota(state, day, limit=2)
    assert not consume_post_quota(state, day, limit=2)
    assert state.posts_today == 2


def test_released_quota_can_be_used_again() -> None:
    state = OwnerState(owner_id=1)
    day = date(2024, 1, 1)

    assert consume_post_quota(state, day, limit=1)
    release_post_quota(state, day)
    assert state.posts_today == 0
    assert consume_post_quota(state, day, limit=1)


def test_release_ignores_other_days() -> None:
    state = OwnerState(owner_id=1, posts_today=2, posts_day=date(2024, 1, 2))

    release_post_quota(state, date(2024, 1, 1))
    assert state.posts_today == 2
    fresh = OwnerState(owner_id=2)
    release_post_quota(fresh, date(2024, 1, 2))
    assert fresh.posts_today == 0


def test_quota_disabled_with_zero_limit() -> None:
    state = OwnerState(owner_id=1)
    for _ in range(10):
        assert consume_post_quota(state, date(2024, 1, 1), limit=0)


@pytest.mark.asyncio
async def test_bot_adapters() -> None:
    bot = FakeBot()
    bot.chats[5] = FakeUser(5, first_name="Five", username=None)
    editor = BotMessageEditor(bot)

    await editor.edit_text(-100, 7, "hello")
    await editor.edit_caption(-100, 8, "caption")
    identity = await identity_resolver(bot)(5)

    assert bot.edited_texts[0]["message_id"] == 7
    assert bot.edited_captions[0]["caption"] == "caption"
    assert identity == Identity(id=5, first_name="Five", last_name="User")
    with pytest.raises(Exception):
        await identity_resolver(bot)(6)
