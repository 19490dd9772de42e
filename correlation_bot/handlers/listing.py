from typing import List

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from aiogram.utils.text_decorations import html_decoration

from correlation_bot.context import AppContext
from correlation_bot.models import NEED, RESOURCE, StoredItem
from correlation_bot.texts import Locale, user_locale


router = Router()


def format_item_list(items: List[StoredItem], locale: Locale) -> str:
    lines = []
    for index, item in enumerate(items, start=1):
        key = "list_item_photo" if item.photo_file_id else "list_item"
        lines.append(locale.t(key, index=index, description=html_decoration.quote(item.description)).rstrip())
    return "\n".join(lines)


async def reply_with_list(message: Message, context: AppContext, kind: str) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    items = context.store.items(message.from_user.id, kind)
    if not items:
        await message.answer(locale.t("no_needs" if kind == NEED else "no_resources"))
        return
    key = "list_needs" if kind == NEED else "list_resources"
    await message.answer(locale.t(key, list=format_item_list(items, locale)))


@router.message(Command("needs", "listneeds"))
async def handle_list_needs(message: Message, context: AppContext) -> None:
    await reply_with_list(message, context, NEED)


@router.message(Command("resources", "listresources"))
async def handle_list_resources(message: Message, context: AppContext) -> None:
    await reply_with_list(message, context, RESOURCE)
