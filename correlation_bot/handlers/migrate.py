import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from correlation_bot.context import AppContext
from correlation_bot.services.migration import migrate_mentions
from correlation_bot.services.telegram import BotMessageEditor, identity_resolver

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


router = Router()


@router.message(Command("migrate"))
async def handle_migrate(message: Message, command: CommandObject, context: AppContext) -> None:
    if message.from_user.id not in context.config.admin_ids:
        await message.reply(context.config.locale.t("not_allowed"))
        return

    limit = context.config.migration_limit or DEFAULT_LIMIT
    if command.args:
        try:
            limit = int(command.args.split()[0])
        except ValueError:
            await message.reply(context.config.locale.t("migrate_usage"))
            return

    logger.info("Mention migration requested by %s with limit %d", message.from_user.id, limit)
    await message.reply(context.config.locale.t("migration_started", limit=limit))
    updated = await migrate_mentions(
        context.store,
        identity_resolver(context.bot),
        BotMessageEditor(context.bot),
        context.config.locale,
        limit,
        trace=context.config.migration_trace,
    )
    await message.reply(context.config.locale.t("migration_done", count=updated))
