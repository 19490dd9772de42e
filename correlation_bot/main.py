import asyncio
import logging

import asyncpg
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums.parse_mode import ParseMode
from dotenv import load_dotenv

from correlation_bot.config import load_config
from correlation_bot.context import AppContext
from correlation_bot.db import apply_migrations
from correlation_bot.handlers import router
from correlation_bot.services.migration import migrate_mentions
from correlation_bot.services.telegram import BotMessageEditor, identity_resolver
from correlation_bot.store import ItemStore

logger = logging.getLogger(__name__)


async def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    config = load_config()
    bot = Bot(token=config.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    pool = await asyncpg.create_pool(dsn=config.db_dsn)

    try:
        await apply_migrations(pool, config.migrations_dir)
        store = await ItemStore.load(pool)
        context = AppContext(bot=bot, pool=pool, config=config, store=store)

        if config.migration_limit > 0:
            updated = await migrate_mentions(
                store,
                identity_resolver(bot),
                BotMessageEditor(bot),
                config.locale,
                config.migration_limit,
                trace=config.migration_trace,
            )
            logger.info("Startup mention migration updated %d posts", updated)

        dp = Dispatcher()
        dp.include_router(router)
        logger.info("Starting bot")
        await dp.start_polling(bot, context=context, allowed_updates=dp.resolve_used_update_types())
    finally:
        await pool.close()
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
