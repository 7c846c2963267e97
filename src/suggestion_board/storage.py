"""Storage layer abstractions."""

from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime
from typing import Dict, Iterable, Optional

from .models import Item

LOGGER = logging.getLogger(__name__)


class AbstractStorage:
    """Interface for keeping board items and ban records."""

    def add_item(self, item: Item) -> int:
        raise NotImplementedError

    def get_item(self, index: int) -> Optional[Item]:
        raise NotImplementedError

    def save_item(self, index: int, item: Item) -> None:
        raise NotImplementedError

    def list_items(self) -> Iterable[Item]:
        raise NotImplementedError

    def get_ban_expiry(self, identity: str) -> Optional[datetime]:
        raise NotImplementedError

    def save_ban(self, identity: str, expires_at: datetime) -> None:
        raise NotImplementedError


class InMemoryStorage(AbstractStorage):
    """List and dictionary based storage; everything is lost on restart."""

    def __init__(self, seed: Iterable[str] = ()) -> None:
        self._items: list[Item] = []
        self._bans: Dict[str, datetime] = {}
        for text in seed:
            self.add_item(Item(text=text))

    def add_item(self, item: Item) -> int:
        self._items.append(deepcopy(item))
        return len(self._items) - 1

    def get_item(self, index: int) -> Optional[Item]:
        if index < 0 or index >= len(self._items):
            return None
        return deepcopy(self._items[index])

    def save_item(self, index: int, item: Item) -> None:
        if index < 0 or index >= len(self._items):
            raise IndexError(f"No item at index {index}")
        self._items[index] = deepcopy(item)

    def list_items(self) -> Iterable[Item]:
        return [deepcopy(item) for item in self._items]

    def get_ban_expiry(self, identity: str) -> Optional[datetime]:
        return self._bans.get(identity)

    def save_ban(self, identity: str, expires_at: datetime) -> None:
        LOGGER.debug("Recording ban for %s until %s", identity, expires_at.isoformat())
        self._bans[identity] = expires_at
