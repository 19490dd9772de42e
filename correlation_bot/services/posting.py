import logging

from aiogram.enums.parse_mode import ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.text_decorations import html_decoration

from correlation_bot.context import AppContext
from correlation_bot.mention import Dialect, Identity, build_mention
from correlation_bot.models import NEED, StoredItem, utcnow
from correlation_bot.texts import Locale

logger = logging.getLogger(__name__)


def compose_channel_text(kind: str, mention: str, description: str, locale: Locale) -> str:
    key = "channel_need" if kind == NEED else "channel_resource"
    # Photos may go out without a caption of their own.
    return locale.t(key, mention=mention, description=html_decoration.quote(description)).rstrip()


def item_summary(item: StoredItem, locale: Locale) -> str:
    if not item.description and item.photo_file_id:
        return locale.t("photo_without_caption")
    return html_decoration.quote(item.description)


def channel_text_for(item: StoredItem, identity: Identity, locale: Locale) -> str:
    return compose_channel_text(item.kind, build_mention(identity, Dialect.HTML), item.description, locale)


async def publish_item(context: AppContext, item: StoredItem, identity: Identity) -> bool:
    """Post ``item`` to the channel and remember where it landed.

    The identity snapshot is stored even when publishing fails so the post
    can be rebuilt later without another lookup.
    """
    item.user = identity
    item.updated_at = utcnow()
    text = channel_text_for(item, identity, context.config.locale)
    try:
        if item.photo_file_id:
            post = await context.bot.send_photo(
                chat_id=context.config.channel_id,
                photo=item.photo_file_id,
                caption=text,
                parse_mode=ParseMode.HTML,
            )
        else:
            post = await context.bot.send_message(
                chat_id=context.config.channel_id,
                text=text,
                parse_mode=ParseMode.HTML,
            )
    except TelegramAPIError:
        logger.exception("Failed to publish %s %s to the channel", item.kind, item.guid)
        item.clear_channel_post()
        return False

    item.channel_chat_id = post.chat.id
    item.channel_message_id = post.message_id
    logger.info("Published %s %s as message %s", item.kind, item.guid, post.message_id)
    return True


async def delete_item_post(context: AppContext, item: StoredItem) -> None:
    if not item.has_channel_post:
        return
    try:
        await context.bot.delete_message(chat_id=item.channel_chat_id, message_id=item.channel_message_id)
    except TelegramAPIError:
        logger.warning(
            "Could not delete channel message %s for %s %s",
            item.channel_message_id,
            item.kind,
            item.guid,
            exc_info=True,
        )
    item.clear_channel_post()


async def bump_item(context: AppContext, item: StoredItem, identity: Identity) -> bool:
    await delete_item_post(context, item)
    return await publish_item(context, item, identity)
