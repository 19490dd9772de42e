import logging
from typing import Dict, List, Optional, Set, Union

import asyncpg

from correlation_bot import db
from correlation_bot.models import KINDS, OwnerState, StoredItem

logger = logging.getLogger(__name__)


class ItemStore:
    """Owners with their needs and resources, kept in memory.

    Owners and items keep insertion order. Mutations happen in place; call
    ``touch`` after changing an item or owner state so ``persist`` writes it.
    """

    def __init__(self, pool: Optional[asyncpg.Pool]) -> None:
        self._pool = pool
        self._owners: Dict[int, OwnerState] = {}
        self._items: Dict[int, Dict[str, List[StoredItem]]] = {}
        self._dirty: Set[int] = set()
        self._deleted: List[str] = []

    @classmethod
    async def load(cls, pool: asyncpg.Pool) -> "ItemStore":
        store = cls(pool)
        for record in await db.fetch_owners(pool):
            owner = db.owner_from_record(record)
            store._owners[owner.owner_id] = owner
            store._items[owner.owner_id] = {kind: [] for kind in KINDS}
        count = 0
        for record in await db.fetch_items(pool):
            item = db.item_from_record(record)
            if item.owner_id not in store._owners:
                logger.warning("Item %s belongs to unknown owner %s, skipping", item.guid, item.owner_id)
                continue
            if item.kind not in KINDS:
                logger.warning("Item %s has unknown kind %s, skipping", item.guid, item.kind)
                continue
            store._items[item.owner_id][item.kind].append(item)
            count += 1
        logger.info("Loaded %d owners and %d items", len(store._owners), count)
        return store

    def owners(self) -> List[int]:
        return list(self._owners)

    def owner_state(self, owner_id: int) -> OwnerState:
        owner_id = int(owner_id)
        state = self._owners.get(owner_id)
        if state is None:
            state = OwnerState(owner_id=owner_id)
            self._owners[owner_id] = state
            self._items[owner_id] = {kind: [] for kind in KINDS}
            self._dirty.add(owner_id)
        return state

    def items(self, owner_id: int, kind: str) -> List[StoredItem]:
        if kind not in KINDS:
            raise ValueError(f"Unknown item kind: {kind}")
        self.owner_state(owner_id)
        return self._items[int(owner_id)][kind]

    def add(self, item: StoredItem) -> None:
        self.items(item.owner_id, item.kind).append(item)
        self.touch(item.owner_id)

    def remove(self, owner_id: int, kind: str, index: int) -> StoredItem:
        item = self.items(owner_id, kind).pop(index)
        self._deleted.append(item.guid)
        self.touch(owner_id)
        return item

    def find_by_channel_message(self, chat_id: int, message_id: int) -> Optional[StoredItem]:
        for kinds in self._items.values():
            for items in kinds.values():
                for item in items:
                    if item.channel_chat_id == chat_id and item.channel_message_id == message_id:
                        return item
        return None

    def touch(self, target: Union[int, StoredItem]) -> None:
        owner_id = target.owner_id if isinstance(target, StoredItem) else target
        self.owner_state(owner_id)
        self._dirty.add(int(owner_id))

    @property
    def has_changes(self) -> bool:
        return bool(self._dirty or self._deleted)

    async def persist(self) -> None:
        if not self.has_changes:
            return
        owners = [self._owners[owner_id] for owner_id in self._owners if owner_id in self._dirty]
        items: List[StoredItem] = []
        positions: Dict[str, int] = {}
        for owner in owners:
            for kind in KINDS:
                for position, item in enumerate(self._items[owner.owner_id][kind]):
                    items.append(item)
                    positions[item.guid] = position
        await db.save_changes(self._pool, owners, items, positions, list(self._deleted))
        logger.debug("Persisted %d owners, %d items, %d deletions", len(owners), len(items), len(self._deleted))
        self._dirty.clear()
        self._deleted.clear()
