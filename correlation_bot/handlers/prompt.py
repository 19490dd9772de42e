from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from correlation_bot.context import AppContext
from correlation_bot.keyboards import CANCEL_CALLBACK, build_cancel_keyboard, build_main_keyboard
from correlation_bot.models import NEED, RESOURCE
from correlation_bot.states import PostState
from correlation_bot.texts import text_variants, user_locale


router = Router()


async def start_pending_post(message: Message, state: FSMContext, context: AppContext, kind: str) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    await state.update_data(kind=kind)
    await state.set_state(PostState.waiting_description)
    prompt_key = "prompt_need" if kind == NEED else "prompt_resource"
    await message.answer(locale.t(prompt_key), reply_markup=build_cancel_keyboard(locale))


@router.message(Command("need"))
@router.message(F.text.in_(text_variants("button_need")))
async def handle_need_prompt(message: Message, state: FSMContext, context: AppContext) -> None:
    await start_pending_post(message, state, context, NEED)


@router.message(Command("resource"))
@router.message(F.text.in_(text_variants("button_resource")))
async def handle_resource_prompt(message: Message, state: FSMContext, context: AppContext) -> None:
    await start_pending_post(message, state, context, RESOURCE)


@router.message(Command("cancel"))
async def handle_cancel(message: Message, state: FSMContext, context: AppContext) -> None:
    locale = user_locale(message.from_user, context.config.locale)
    if await state.get_state() is None:
        await message.answer(locale.t("nothing_to_cancel"), reply_markup=build_main_keyboard(locale))
        return
    await state.clear()
    await message.answer(locale.t("cancelled"), reply_markup=build_main_keyboard(locale))


@router.callback_query(F.data == CANCEL_CALLBACK)
async def cancel_callback(callback: CallbackQuery, state: FSMContext, context: AppContext) -> None:
    locale = user_locale(callback.from_user, context.config.locale)
    await state.clear()
    await callback.answer(locale.t("cancelled"))
    if callback.message:
        await callback.message.edit_text(locale.t("cancelled"), reply_markup=None)
