from dataclasses import dataclass

import asyncpg
from aiogram import Bot

from correlation_bot.config import AppConfig
from correlation_bot.store import ItemStore


@dataclass
class AppContext:
    bot: Bot
    pool: asyncpg.Pool
    config: AppConfig
    store: ItemStore
