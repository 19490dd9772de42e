from dataclasses import dataclass
from typing import Any, Dict, List, Optional


TextMap = Dict[str, str]


LOCALES: Dict[str, TextMap] = {
    "en": {
        "welcome": (
            "Welcome to Correlation Center Bot!\n\n"
            "The Correlation Center is a system inspired by Jacque Fresco ideas. "
            "It ensures that all needs are satisfied using available resources. "
            "In short, it's a system to manage needs and resources.\n\n"
            "Type /help to see all commands.\n\n"
            "Use the keyboard below for quick access."
        ),
        "help": (
            "Available commands:\n"
            "/start - Start the bot\n"
            "/help - Show this help message\n"
            "/need - Add a need\n"
            "/needs - List your needs\n"
            "/resource - Add a resource\n"
            "/resources - List your resources\n"
            "/deleteneed N - Delete need number N\n"
            "/deleteresource N - Delete resource number N\n"
            "/bumpneed N - Post need number N to the channel again\n"
            "/bumpresource N - Post resource number N to the channel again\n"
            "/cancel - Cancel current pending action"
        ),
        "prompt_need": "Please send the description of your need as your next message.",
        "prompt_resource": "Please send the description of your resource as your next message.",
        "button_need": "Need",
        "button_resource": "Resource",
        "cancel_button": "Cancel",
        "cancelled": "Cancelled.",
        "nothing_to_cancel": "There is nothing to cancel.",
        "description_empty": "The description can't be empty. Send text or a photo.",
        "description_is_command": "Commands can't be posted. Send the description, or /cancel to stop.",
        "description_is_bot_message": "That is one of my own messages. Please describe it in your own words.",
        "limit_reached": "You have reached the limit of {limit} posts per day. Try again tomorrow.",
        "need_added": "Need added: {item}",
        "resource_added": "Resource added: {item}",
        "photo_without_caption": "(photo)",
        "publish_failed": "I saved it, but couldn't publish it to the channel. Use /bumpneed or /bumpresource later.",
        "no_needs": "You have no needs yet.",
        "no_resources": "You have no resources yet.",
        "list_needs": "Your needs:\n{list}",
        "list_resources": "Your resources:\n{list}",
        "list_item": "{index}. {description}",
        "list_item_photo": "{index}. [photo] {description}",
        "delete_need_usage": "Usage: /deleteneed N (see /needs for numbers)",
        "delete_resource_usage": "Usage: /deleteresource N (see /resources for numbers)",
        "delete_need_success": "Need deleted: {item}",
        "delete_resource_success": "Resource deleted: {item}",
        "bump_need_usage": "Usage: /bumpneed N (see /needs for numbers)",
        "bump_resource_usage": "Usage: /bumpresource N (see /resources for numbers)",
        "bump_success": "Posted again: {item}",
        "bump_failed": "Couldn't post it to the channel, try again later.",
        "channel_need": "New need from {mention}:\n{description}",
        "channel_resource": "New resource from {mention}:\n{description}",
        "not_allowed": "You are not allowed to do that.",
        "migrate_usage": "Usage: /migrate [limit]",
        "migration_started": "Updating mentions in channel posts (limit {limit})...",
        "migration_done": "Mentions updated in {count} posts.",
    },
    "ru": {
        "welcome": (
            "Добро пожаловать в бот Корреляционный Центр!\n\n"
            "Корреляционный Центр — это система, вдохновлённая идеями Жака Фреско. "
            "Она обеспечивает удовлетворение всех потребностей с помощью доступных ресурсов. "
            "Проще говоря, это система для управления потребностями и ресурсами.\n\n"
            "Напишите /help чтобы увидеть все команды.\n\n"
            "Используйте клавиатуру ниже для быстрого доступа."
        ),
        "help": (
            "Доступные команды:\n"
            "/start - Запустить бота\n"
            "/help - Показать это сообщение\n"
            "/need - Добавить потребность\n"
            "/needs - Показать ваши потребности\n"
            "/resource - Добавить ресурс\n"
            "/resources - Показать ваши ресурсы\n"
            "/deleteneed N - Удалить потребность номер N\n"
            "/deleteresource N - Удалить ресурс номер N\n"
            "/bumpneed N - Повторно опубликовать потребность номер N\n"
            "/bumpresource N - Повторно опубликовать ресурс номер N\n"
            "/cancel - Отменить текущее действие"
        ),
        "prompt_need": "Пожалуйста, отправьте описание вашей потребности следующим сообщением.",
        "prompt_resource": "Пожалуйста, отправьте описание вашего ресурса следующим сообщением.",
        "button_need": "Потребность",
        "button_resource": "Ресурс",
        "cancel_button": "Отмена",
        "cancelled": "Отменено.",
        "nothing_to_cancel": "Нечего отменять.",
        "description_empty": "Описание не может быть пустым. Отправьте текст или фото.",
        "description_is_command": "Команду нельзя опубликовать. Отправьте описание или /cancel для отмены.",
        "description_is_bot_message": "Это моё собственное сообщение. Опишите, пожалуйста, своими словами.",
        "limit_reached": "Вы достигли лимита в {limit} публикаций в день. Попробуйте завтра.",
        "need_added": "Потребность добавлена: {item}",
        "resource_added": "Ресурс добавлен: {item}",
        "photo_without_caption": "(фото)",
        "publish_failed": "Сохранено, но опубликовать в канал не удалось. Попробуйте позже через /bumpneed или /bumpresource.",
        "no_needs": "У вас пока нет потребностей.",
        "no_resources": "У вас пока нет ресурсов.",
        "list_needs": "Ваши потребности:\n{list}",
        "list_resources": "Ваши ресурсы:\n{list}",
        "delete_need_usage": "Использование: /deleteneed N (номера смотрите в /needs)",
        "delete_resource_usage": "Использование: /deleteresource N (номера смотрите в /resources)",
        "delete_need_success": "Потребность удалена: {item}",
        "delete_resource_success": "Ресурс удалён: {item}",
        "bump_need_usage": "Использование: /bumpneed N (номера смотрите в /needs)",
        "bump_resource_usage": "Использование: /bumpresource N (номера смотрите в /resources)",
        "bump_success": "Опубликовано повторно: {item}",
        "bump_failed": "Не удалось опубликовать в канал, попробуйте позже.",
        "channel_need": "Новая потребность от {mention}:\n{description}",
        "channel_resource": "Новый ресурс от {mention}:\n{description}",
        "not_allowed": "У вас нет прав на это действие.",
    },
}

# Messages the bot sends on its own; used to recognise them when they come back.
SYSTEM_MESSAGE_KEYS = ("welcome", "help", "prompt_need", "prompt_resource")


def get_text(locale: str, key: str) -> str:
    default = LOCALES.get("en", {})
    lang_map = LOCALES.get(locale, default)
    return lang_map.get(key, default.get(key, key))


@dataclass(frozen=True)
class Locale:
    name: str

    def t(self, key: str, **kwargs: Any) -> str:
        return get_text(self.name, key).format(**kwargs)


def user_locale(user: Any, fallback: Locale) -> Locale:
    language = getattr(user, "language_code", None)
    if language and language in LOCALES:
        return Locale(language)
    return fallback


def text_variants(key: str) -> List[str]:
    variants: List[str] = []
    for texts in LOCALES.values():
        value = texts.get(key)
        if value and value not in variants:
            variants.append(value)
    return variants


def bot_message_variants() -> List[str]:
    variants: List[str] = []
    for key in SYSTEM_MESSAGE_KEYS:
        for value in text_variants(key):
            if value not in variants:
                variants.append(value)
    return variants


def is_bot_system_message(text: Optional[str], sender_id: Optional[int], bot_id: Optional[int]) -> bool:
    if not text or sender_id is None or sender_id != bot_id:
        return False
    stripped = text.strip()
    return any(stripped.startswith(variant.strip()) for variant in bot_message_variants())
