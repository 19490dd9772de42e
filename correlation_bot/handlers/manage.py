import logging
from typing import List, Optional

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from correlation_bot.context import AppContext
from correlation_bot.mention import Identity
from correlation_bot.models import NEED, RESOURCE, StoredItem
from correlation_bot.services import quota
from correlation_bot.services.posting import bump_item, delete_item_post, item_summary
from correlation_bot.texts import user_locale

logger = logging.getLogger(__name__)


router = Router()


def parse_item_index(args: Optional[str], items: List[StoredItem]) -> Optional[int]:
    """Turn a 1-based item number from command arguments into a list index."""
    if not args:
        return None
    token = args.split()[0]
    try:
        number = int(token)
    except ValueError:
        return None
    if number < 1 or number > len(items):
        return None
    return number - 1


async def delete_item(message: Message, command: CommandObject, context: AppContext, kind: str) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    owner_id = message.from_user.id
    index = parse_item_index(command.args, context.store.items(owner_id, kind))
    if index is None:
        await message.answer(locale.t("delete_need_usage" if kind == NEED else "delete_resource_usage"))
        return

    removed = context.store.remove(owner_id, kind, index)
    await delete_item_post(context, removed)
    await context.store.persist()
    logger.info("Owner %s deleted %s %s", owner_id, kind, removed.guid)
    success_key = "delete_need_success" if kind == NEED else "delete_resource_success"
    await message.answer(locale.t(success_key, item=item_summary(removed, locale)))


async def bump(message: Message, command: CommandObject, context: AppContext, kind: str) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    owner_id = message.from_user.id
    items = context.store.items(owner_id, kind)
    index = parse_item_index(command.args, items)
    if index is None:
        await message.answer(locale.t("bump_need_usage" if kind == NEED else "bump_resource_usage"))
        return

    owner_state = context.store.owner_state(owner_id)
    limit = context.config.daily_post_limit
    day = quota.today()
    if not quota.consume_post_quota(owner_state, day, limit):
        await message.answer(locale.t("limit_reached", limit=limit))
        return

    item = items[index]
    published = await bump_item(context, item, Identity.from_user(message.from_user))
    if not published:
        quota.release_post_quota(owner_state, day)
    context.store.touch(item)
    await context.store.persist()
    if not published:
        await message.answer(locale.t("bump_failed"))
        return
    logger.info("Owner %s bumped %s %s", owner_id, kind, item.guid)
    await message.answer(locale.t("bump_success", item=item_summary(item, locale)))


@router.message(Command("deleteneed"))
async def handle_delete_need(message: Message, command: CommandObject, context: AppContext) -> None:
    await delete_item(message, command, context, NEED)


@router.message(Command("deleteresource"))
async def handle_delete_resource(message: Message, command: CommandObject, context: AppContext) -> None:
    await delete_item(message, command, context, RESOURCE)


@router.message(Command("bumpneed"))
async def handle_bump_need(message: Message, command: CommandObject, context: AppContext) -> None:
    await bump(message, command, context, NEED)


@router.message(Command("bumpresource"))
async def handle_bump_resource(message: Message, command: CommandObject, context: AppContext) -> None:
    await bump(message, command, context, RESOURCE)
