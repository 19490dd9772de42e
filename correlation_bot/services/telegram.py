from aiogram import Bot
from aiogram.enums.parse_mode import ParseMode

from correlation_bot.mention import Identity
from correlation_bot.services.migration import IdentityResolver


class BotMessageEditor:
    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def edit_text(self, chat_id: int, message_id: int, text: str) -> None:
        await self._bot.edit_message_text(
            text=text,
            chat_id=chat_id,
            message_id=message_id,
            parse_mode=ParseMode.HTML,
        )

    async def edit_caption(self, chat_id: int, message_id: int, caption: str) -> None:
        await self._bot.edit_message_caption(
            chat_id=chat_id,
            message_id=message_id,
            caption=caption,
            parse_mode=ParseMode.HTML,
        )


def identity_resolver(bot: Bot) -> IdentityResolver:
    async def resolve(owner_id: int) -> Identity:
        chat = await bot.get_chat(owner_id)
        return Identity.from_user(chat)

    return resolve
