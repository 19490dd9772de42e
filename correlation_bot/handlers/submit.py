import logging
from typing import Any, Optional

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from correlation_bot.context import AppContext
from correlation_bot.keyboards import build_main_keyboard
from correlation_bot.mention import Identity
from correlation_bot.models import KINDS, NEED, StoredItem
from correlation_bot.services import quota
from correlation_bot.services.posting import item_summary, publish_item
from correlation_bot.states import PostState
from correlation_bot.texts import is_bot_system_message, user_locale

logger = logging.getLogger(__name__)


router = Router()


def forwarded_sender_id(message: Any) -> Optional[int]:
    origin = getattr(message, "forward_origin", None)
    sender = getattr(origin, "sender_user", None)
    if sender is None:
        return None
    return sender.id


@router.message(PostState.waiting_description, F.text | F.photo)
async def handle_description(message: Message, state: FSMContext, context: AppContext) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    data = await state.get_data()
    kind = data.get("kind")
    if kind not in KINDS:
        logger.warning("Pending post for %s has unknown kind %r", message.from_user.id, kind)
        await state.clear()
        return

    if message.text and message.text.startswith("/"):
        await message.answer(locale.t("description_is_command"))
        return

    description = (message.text or message.caption or "").strip()
    if not description and not message.photo:
        await message.answer(locale.t("description_empty"))
        return
    if is_bot_system_message(description, forwarded_sender_id(message), context.bot.id):
        await message.answer(locale.t("description_is_bot_message"))
        return

    owner_id = message.from_user.id
    owner_state = context.store.owner_state(owner_id)
    limit = context.config.daily_post_limit
    day = quota.today()
    if not quota.consume_post_quota(owner_state, day, limit):
        await state.clear()
        await message.answer(locale.t("limit_reached", limit=limit), reply_markup=build_main_keyboard(locale))
        return

    photo_file_id = message.photo[-1].file_id if message.photo else None
    item = StoredItem(owner_id=owner_id, kind=kind, description=description, photo_file_id=photo_file_id)
    published = await publish_item(context, item, Identity.from_user(message.from_user))
    if not published:
        quota.release_post_quota(owner_state, day)
    context.store.add(item)
    await context.store.persist()
    await state.clear()

    added_key = "need_added" if kind == NEED else "resource_added"
    reply = locale.t(added_key, item=item_summary(item, locale))
    if not published:
        reply = f"{reply}\n\n{locale.t('publish_failed')}"
    await message.answer(reply, reply_markup=build_main_keyboard(locale))
    logger.info("Owner %s added %s %s", owner_id, kind, item.guid)
