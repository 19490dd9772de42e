import logging
from typing import Any, Awaitable, Callable, Iterator

from correlation_bot.mention import Identity
from correlation_bot.models import KINDS, StoredItem, utcnow
from correlation_bot.services.posting import channel_text_for
from correlation_bot.store import ItemStore
from correlation_bot.texts import Locale

logger = logging.getLogger(__name__)

IdentityResolver = Callable[[int], Awaitable[Identity]]


def is_content_unchanged(exc: BaseException) -> bool:
    return "message is not modified" in str(exc).lower()


def iter_posted_items(store: ItemStore) -> Iterator[StoredItem]:
    for owner_id in store.owners():
        for kind in KINDS:
            for item in store.items(owner_id, kind):
                if item.has_channel_post:
                    yield item


async def migrate_mentions(
    store: ItemStore,
    resolve_identity: IdentityResolver,
    editor: Any,
    locale: Locale,
    limit: int,
    trace: bool = False,
) -> int:
    """Rewrite channel posts so their author is a clickable mention.

    Goes through owners and their items in stored order and edits at most
    ``limit`` posts. Lookup and edit failures skip the item, so a later run
    picks it up again. Returns the number of items updated.
    """
    level = logging.INFO if trace else logging.DEBUG
    attempted = 0
    updated = 0

    for item in iter_posted_items(store):
        if attempted >= limit:
            break

        try:
            identity = await resolve_identity(item.owner_id)
        except Exception:
            logger.warning("Identity lookup failed for owner %s, skipping %s", item.owner_id, item.guid, exc_info=True)
            continue

        attempted += 1
        text = channel_text_for(item, identity, locale)
        try:
            if item.photo_file_id:
                await editor.edit_caption(item.channel_chat_id, item.channel_message_id, text)
            else:
                await editor.edit_text(item.channel_chat_id, item.channel_message_id, text)
        except Exception as exc:
            if not is_content_unchanged(exc):
                logger.exception("Failed to edit channel message %s for %s", item.channel_message_id, item.guid)
                continue
            logger.log(level, "Message %s already up to date", item.channel_message_id)

        item.user = identity
        item.updated_at = utcnow()
        store.touch(item)
        updated += 1
        logger.log(level, "Updated mention for %s %s (owner %s)", item.kind, item.guid, item.owner_id)

    if updated:
        await store.persist()
    logger.info("Mention migration finished: %d attempted, %d updated", attempted, updated)
    return updated
