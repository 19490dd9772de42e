import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from correlation_bot.texts import Locale

logger = logging.getLogger(__name__)

ChatId = Union[int, str]

DEFAULT_DAILY_POST_LIMIT = 5


@dataclass
class AppConfig:
    bot_token: str
    channel_id: ChatId
    admin_ids: List[int]
    migrations_dir: Path
    db_dsn: str
    locale: Locale
    daily_post_limit: int = DEFAULT_DAILY_POST_LIMIT
    migration_limit: int = 0
    migration_trace: bool = False


def parse_admin_ids(value: str) -> List[int]:
    if not value:
        return []
    ids: List[int] = []
    for raw in value.split(","):
        raw = raw.strip()
        if not raw:
            continue
        try:
            ids.append(int(raw))
        except ValueError:
            logger.warning("Skipped admin id that is not a number: %s", raw)
    return ids


def parse_chat_id(value: str) -> ChatId:
    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)
    if not value.startswith("@"):
        return f"@{value}"
    return value


def parse_int(value: str, name: str, default: int) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("%s is not a number (%s), using %s", name, value, default)
        return default


def parse_flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    bot_token = os.environ.get("BOT_TOKEN")
    channel_raw = os.environ.get("CHANNEL_ID", "")
    admin_ids_raw = os.environ.get("ADMIN_IDS", "")
    locale_name = os.environ.get("LOCALE", "en").lower()
    db_dsn = os.environ.get("DATABASE_URL") or (
        "postgresql://{user}:{password}@{host}:{port}/{database}".format(
            user=os.environ.get("POSTGRES_USER", "correlation"),
            password=os.environ.get("POSTGRES_PASSWORD", "correlation"),
            host=os.environ.get("POSTGRES_HOST", "db"),
            port=os.environ.get("POSTGRES_PORT", "5432"),
            database=os.environ.get("POSTGRES_DB", "correlation"),
        )
    )
    migrations_dir = Path(os.environ.get("MIGRATIONS_DIR", "schema"))

    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required")
    if not channel_raw.strip():
        raise RuntimeError("CHANNEL_ID is required")

    return AppConfig(
        bot_token=bot_token,
        channel_id=parse_chat_id(channel_raw),
        admin_ids=parse_admin_ids(admin_ids_raw),
        migrations_dir=migrations_dir,
        db_dsn=db_dsn,
        locale=Locale(locale_name),
        daily_post_limit=parse_int(
            os.environ.get("DAILY_POST_LIMIT", ""), "DAILY_POST_LIMIT", DEFAULT_DAILY_POST_LIMIT
        ),
        migration_limit=parse_int(os.environ.get("MIGRATION_LIMIT", ""), "MIGRATION_LIMIT", 0),
        migration_trace=parse_flag(os.environ.get("MIGRATION_TRACE", "")),
    )
