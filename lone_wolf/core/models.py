from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ItemKind = Literal["food", "herb", "tool", "key_item"]
FollowerRole = Literal["hunter", "scout", "guard", "none"]
EndingOutcome = Literal["victory", "defeat"]
GamePhase = Literal["start_screen", "playing", "event_triggered", "game_over", "victory"]
ActionId = Literal["rest", "hunt", "forage", "howl"]
StatName = Literal["health", "hunger", "energy", "reputation"]

SAVE_VERSION = 2

STAT_MIN = 0
STAT_MAX = 100
STAT_NAMES: tuple[StatName, StatName, StatName, StatName] = ("health", "hunger", "energy", "reputation")
ACTION_IDS: tuple[ActionId, ActionId, ActionId, ActionId] = ("rest", "hunt", "forage", "howl")
TERMINAL_PHASES: frozenset[str] = frozenset({"game_over", "victory"})


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FrozenModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class Item(FrozenModel):
    name: str = Field(min_length=1)
    kind: ItemKind
    effect_value: int = 0
    description: str = ""


class Follower(StrictModel):
    name: str = Field(min_length=1)
    role: FollowerRole = "none"
    loyalty: int = Field(default=50, ge=STAT_MIN, le=STAT_MAX)


class StatDeltas(FrozenModel):
    health: int = 0
    hunger: int = 0
    energy: int = 0
    reputation: int = 0

    def is_empty(self) -> bool:
        return not (self.health or self.hunger or self.energy or self.reputation)

    def describe(self) -> str:
        parts = [f"{name} {value:+d}" for name, value in self.model_dump().items() if value]
        return ", ".join(parts) or "no effect"


class GameEvent(FrozenModel):
    title: str = Field(min_length=1)
    description: str = ""
    priority: int
    effects: StatDeltas = Field(default_factory=StatDeltas)


class GameSnapshot(FrozenModel):
    day: int = Field(ge=1)
    health: int = Field(ge=STAT_MIN, le=STAT_MAX)
    hunger: int = Field(ge=STAT_MIN, le=STAT_MAX)
    energy: int = Field(ge=STAT_MIN, le=STAT_MAX)
    current_node_id: int


class PlayerState(StrictModel):
    health: int = Field(ge=STAT_MIN, le=STAT_MAX)
    hunger: int = Field(ge=STAT_MIN, le=STAT_MAX)
    energy: int = Field(ge=STAT_MIN, le=STAT_MAX)
    reputation: int = Field(ge=STAT_MIN, le=STAT_MAX)
    inventory: list[Item] = Field(default_factory=list)
    followers: list[Follower] = Field(default_factory=list)


class SessionSave(StrictModel):
    save_version: int = Field(default=SAVE_VERSION, ge=1)
    day: int = Field(ge=1)
    phase: GamePhase
    player: PlayerState
    current_node_id: int
    pending_events: list[GameEvent] = Field(default_factory=list)
    undo_history: list[GameSnapshot] = Field(default_factory=list)
    pending_actions: list[ActionId] = Field(default_factory=list)
    rng_seed: int | str = 1337
    rng_state: int = Field(gt=0)
    rng_calls: int = Field(default=0, ge=0)


def clamp_stat(value: int) -> int:
    return max(STAT_MIN, min(STAT_MAX, int(value)))


@dataclass(slots=True)
class LogEntry:
    day: int
    phase: str
    type: str
    line: str
    data: dict[str, Any] | None = None

    def format(self) -> str:
        return f"[day={self.day:03d} {self.phase:<15}] [{self.type.upper()}] {self.line}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "phase": self.phase,
            "type": self.type,
            "line": self.line,
            "data": self.data or {},
        }
