from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from correlation_bot.context import AppContext
from correlation_bot.keyboards import build_main_keyboard
from correlation_bot.texts import user_locale


router = Router()


@router.message(CommandStart())
async def handle_start(message: Message, context: AppContext) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    context.store.owner_state(message.from_user.id)
    await context.store.persist()
    await message.answer(locale.t("welcome"), reply_markup=build_main_keyboard(locale))


@router.message(Command("help"))
async def handle_help(message: Message, context: AppContext) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    await message.answer(locale.t("help"))
