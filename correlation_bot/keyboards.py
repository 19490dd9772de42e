from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup

from correlation_bot.texts import Locale


CANCEL_CALLBACK = "cancel_post"


def build_main_keyboard(locale: Locale) -> ReplyKeyboardMarkup:
    need = KeyboardButton(text=locale.t("button_need"))
    resource = KeyboardButton(text=locale.t("button_resource"))
    return ReplyKeyboardMarkup(keyboard=[[need, resource]], resize_keyboard=True)


def build_cancel_keyboard(locale: Locale) -> InlineKeyboardMarkup:
    cancel = InlineKeyboardButton(text=locale.t("cancel_button"), callback_data=CANCEL_CALLBACK)
    return InlineKeyboardMarkup(inline_keyboard=[[cancel]])
