import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import asyncpg

from correlation_bot.mention import Identity
from correlation_bot.models import OwnerState, StoredItem

logger = logging.getLogger(__name__)


async def apply_migrations(pool: asyncpg.Pool, migrations_dir: Path) -> None:
    if not migrations_dir.exists():
        logger.warning("Migrations directory %s does not exist, skipping", migrations_dir)
        return

    for path in sorted(migrations_dir.glob("*.sql")):
        sql = path.read_text()
        logger.info("Applying migration %s", path.name)
        async with pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(sql)


async def fetch_owners(pool: asyncpg.Pool) -> List[asyncpg.Record]:
    query = """
        SELECT owner_id, posts_today, posts_day
        FROM owners
        ORDER BY seq
    """
    logger.debug("SQL fetch_owners: %s", query.strip())
    async with pool.acquire() as conn:
        return await conn.fetch(query)


async def fetch_items(pool: asyncpg.Pool) -> List[asyncpg.Record]:
    query = """
        SELECT guid, owner_id, kind, description, photo_file_id,
               channel_chat_id, channel_message_id, user_snapshot,
               created_at, updated_at
        FROM items
        ORDER BY owner_id, kind, position
    """
    logger.debug("SQL fetch_items: %s", query.strip())
    async with pool.acquire() as conn:
        return await conn.fetch(query)


def encode_snapshot(identity: Optional[Identity]) -> Optional[str]:
    if identity is None:
        return None
    return json.dumps(identity.to_dict(), ensure_ascii=False)


def decode_snapshot(value: Any) -> Optional[Identity]:
    if value is None:
        return None
    if isinstance(value, str):
        value = json.loads(value)
    return Identity.from_mapping(value)


def owner_from_record(record: Any) -> OwnerState:
    return OwnerState(
        owner_id=int(record["owner_id"]),
        posts_today=int(record["posts_today"] or 0),
        posts_day=record["posts_day"],
    )


def item_from_record(record: Any) -> StoredItem:
    return StoredItem(
        owner_id=int(record["owner_id"]),
        kind=record["kind"],
        description=record["description"],
        guid=record["guid"],
        photo_file_id=record["photo_file_id"],
        channel_chat_id=record["channel_chat_id"],
        channel_message_id=record["channel_message_id"],
        user=decode_snapshot(record["user_snapshot"]),
        created_at=record["created_at"],
        updated_at=record["updated_at"],
    )


UPSERT_OWNER = """
    INSERT INTO owners (owner_id, posts_today, posts_day)
    VALUES ($1, $2, $3)
    ON CONFLICT (owner_id) DO UPDATE
    SET posts_today = EXCLUDED.posts_today, posts_day = EXCLUDED.posts_day
"""

UPSERT_ITEM = """
    INSERT INTO items (
        guid, owner_id, kind, position, description, photo_file_id,
        channel_chat_id, channel_message_id, user_snapshot, created_at, updated_at
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9::jsonb, $10, $11)
    ON CONFLICT (guid) DO UPDATE
    SET position = EXCLUDED.position,
        description = EXCLUDED.description,
        photo_file_id = EXCLUDED.photo_file_id,
        channel_chat_id = EXCLUDED.channel_chat_id,
        channel_message_id = EXCLUDED.channel_message_id,
        user_snapshot = EXCLUDED.user_snapshot,
        updated_at = EXCLUDED.updated_at
"""

DELETE_ITEM = "DELETE FROM items WHERE guid = $1"


async def save_changes(
    pool: asyncpg.Pool,
    owners: Iterable[OwnerState],
    items: Iterable[StoredItem],
    positions: Dict[str, int],
    deleted_guids: Iterable[str],
) -> None:
    """Write owners and items and drop deleted items in one transaction."""
    async with pool.acquire() as conn:
        async with conn.transaction():
            for guid in deleted_guids:
                logger.debug("SQL delete item: %s | params=%s", DELETE_ITEM, (guid,))
                await conn.execute(DELETE_ITEM, guid)
            for owner in owners:
                params = (owner.owner_id, owner.posts_today, owner.posts_day)
                logger.debug("SQL upsert owner | params=%s", params)
                await conn.execute(UPSERT_OWNER, *params)
            for item in items:
                params = (
                    item.guid,
                    item.owner_id,
                    item.kind,
                    positions[item.guid],
                    item.description,
                    item.photo_file_id,
                    item.channel_chat_id,
                    item.channel_message_id,
                    encode_snapshot(item.user),
                    item.created_at,
                    item.updated_at,
                )
                logger.debug("SQL upsert item | params=%s", params[:4])
                await conn.execute(UPSERT_ITEM, *params)
