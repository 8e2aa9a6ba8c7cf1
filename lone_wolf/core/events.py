from __future__ import annotations

import heapq
from itertools import count
from typing import TYPE_CHECKING, Iterable, Sequence

from .errors import QueueEmptyError
from .models import GameEvent, StatDeltas
from .rng import RandomSource, WeightedEntry, pick_weighted

if TYPE_CHECKING:
    from .player import Player

PRIORITY_CRITICAL = 1
PRIORITY_URGENT = 2
PRIORITY_NORMAL = 3

EVENT_TEMPLATES: tuple[WeightedEntry[GameEvent], ...] = (
    WeightedEntry(
        GameEvent(
            title="Blizzard",
            description="White-out winds pin you down for the night.",
            priority=PRIORITY_URGENT,
            effects=StatDeltas(energy=-15, hunger=5),
        ),
        weight=3.0,
    ),
    WeightedEntry(
        GameEvent(
            title="Hunters' Trap",
            description="Steel jaws snap shut on a foreleg.",
            priority=PRIORITY_CRITICAL,
            effects=StatDeltas(health=-20),
        ),
        weight=1.0,
    ),
    WeightedEntry(
        GameEvent(
            title="Carrion Find",
            description="Ravens lead you to a fresh carcass.",
            priority=PRIORITY_NORMAL,
            effects=StatDeltas(hunger=-20),
        ),
        weight=2.5,
    ),
    WeightedEntry(
        GameEvent(
            title="Lynx Ambush",
            description="A lynx drops from the pines and rakes your flank.",
            priority=PRIORITY_CRITICAL,
            effects=StatDeltas(health=-12, energy=-5),
        ),
        weight=1.5,
    ),
    WeightedEntry(
        GameEvent(
            title="Distant Howls",
            description="Other wolves sing your name across the valley.",
            priority=PRIORITY_NORMAL,
            effects=StatDeltas(reputation=5),
        ),
        weight=2.0,
    ),
    WeightedEntry(
        GameEvent(
            title="Warm Hollow",
            description="A sheltered hollow lets you sleep without shivering.",
            priority=PRIORITY_NORMAL,
            effects=StatDeltas(energy=15),
        ),
        weight=2.0,
    ),
)


class EventManager:
    """Min-priority queue of pending events.

    Smaller priority values are served first. Events sharing a priority come
    out in the order they were added.
    """

    def __init__(self, templates: Sequence[WeightedEntry[GameEvent]] | None = None) -> None:
        self._heap: list[tuple[int, int, GameEvent]] = []
        self._sequence = count()
        self._templates = list(EVENT_TEMPLATES if templates is None else templates)

    def __len__(self) -> int:
        return len(self._heap)

    def add_event(self, event: GameEvent) -> None:
        heapq.heappush(self._heap, (event.priority, next(self._sequence), event))

    def extend(self, events: Iterable[GameEvent]) -> None:
        for event in events:
            self.add_event(event)

    def trigger_random_event(self, rng: RandomSource) -> GameEvent:
        event = pick_weighted(rng, self._templates)
        self.add_event(event)
        return event

    def has_pending_events(self) -> bool:
        return bool(self._heap)

    def peek_next_event(self) -> GameEvent:
        if not self._heap:
            raise QueueEmptyError("No pending events.")
        return self._heap[0][2]

    def process_next_event(self, player: "Player") -> GameEvent:
        if not self._heap:
            raise QueueEmptyError("No pending events.")
        _, _, event = heapq.heappop(self._heap)
        player.apply_deltas(event.effects)
        return event

    def pending_events(self) -> list[GameEvent]:
        return [entry[2] for entry in sorted(self._heap)]

    def clear(self) -> None:
        self._heap.clear()
