from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .errors import CapacityExceededError, ItemNotConsumableError, ItemNotFoundError
from .models import Item

if TYPE_CHECKING:
    from .player import Player

DEFAULT_CAPACITY = 10


@dataclass(slots=True)
class Inventory:
    """Ordered, bounded item list owned by the player.

    Lookups match names exactly and return the first hit in insertion order.
    """

    capacity: int = DEFAULT_CAPACITY
    _items: list[Item] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def add_item(self, item: Item) -> None:
        if self.is_full():
            raise CapacityExceededError(
                f"Cannot carry '{item.name}': inventory holds {self.capacity} items."
            )
        self._items.append(item)

    def _index_of(self, name: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.name == name:
                return index
        return None

    def find(self, name: str) -> Item | None:
        index = self._index_of(name)
        return None if index is None else self._items[index]

    def has_item(self, name: str) -> bool:
        return self._index_of(name) is not None

    def remove_item(self, name: str) -> Item | None:
        index = self._index_of(name)
        if index is None:
            return None
        return self._items.pop(index)

    def use_item(self, name: str, player: "Player") -> Item:
        index = self._index_of(name)
        if index is None:
            raise ItemNotFoundError(f"No item named '{name}' in inventory.")
        item = self._items[index]
        if item.kind == "key_item":
            raise ItemNotConsumableError(f"'{item.name}' is a key item and cannot be used up.")

        if item.kind == "food":
            player.feed(item.effect_value)
        elif item.kind == "herb":
            player.update_stats(health=item.effect_value)
        # tools carry no stat effect

        del self._items[index]
        return item

    def replace_contents(self, items: list[Item]) -> None:
        if len(items) > self.capacity:
            raise CapacityExceededError(
                f"{len(items)} items exceed inventory capacity {self.capacity}."
            )
        self._items = list(items)
