import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from correlation_bot.mention import Identity


NEED = "need"
RESOURCE = "resource"
KINDS = (NEED, RESOURCE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StoredItem:
    owner_id: int
    kind: str
    description: str
    guid: str = field(default_factory=lambda: str(uuid.uuid4()))
    photo_file_id: Optional[str] = None
    channel_chat_id: Optional[int] = None
    channel_message_id: Optional[int] = None
    user: Optional[Identity] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def has_channel_post(self) -> bool:
        return self.channel_chat_id is not None and self.channel_message_id is not None

    def clear_channel_post(self) -> None:
        self.channel_chat_id = None
        self.channel_message_id = None


@dataclass
class OwnerState:
    owner_id: int
    posts_today: int = 0
    posts_day: Optional[date] = None
