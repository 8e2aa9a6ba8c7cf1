from __future__ import annotations

import logging
from collections import deque
from pathlib import Path
from typing import Any

from .errors import (
    CapacityExceededError,
    ChoiceLockedError,
    NoHistoryError,
    NotInitializedError,
    QueueEmptyError,
    SessionOverError,
    UnknownActionError,
)
from .events import PRIORITY_URGENT, EventManager
from .models import (
    ACTION_IDS,
    STAT_MAX,
    TERMINAL_PHASES,
    ActionId,
    FollowerRole,
    GameEvent,
    GamePhase,
    GameSnapshot,
    Item,
    LogEntry,
    SessionSave,
    StatDeltas,
)
from .persistence import RestoredSession, load_session, write_session
from .player import Player
from .rng import DeterministicRNG
from .settings import EngineSettings
from .story import Side, StoryGraph, StoryNode

logger = logging.getLogger(__name__)

CHOICE_SIDES: dict[str, Side] = {"a": "left", "left": "left", "b": "right", "right": "right"}

HUNT_ENERGY_COST = 15
HUNT_HUNGER_RELIEF = 25
HUNT_INJURY_CHANCE = 0.3
HOWL_REPUTATION = 5

FORAGED_HERB = Item(
    name="Feverfew",
    kind="herb",
    effect_value=15,
    description="Bitter leaves that dull pain and close small wounds.",
)
HUNT_INJURY = GameEvent(
    title="Hunt Gone Wrong",
    description="The quarry fights back before it falls.",
    priority=PRIORITY_URGENT,
    effects=StatDeltas(health=-10),
)
RECRUIT_POOL: tuple[tuple[str, FollowerRole], ...] = (
    ("Thistle", "hunter"),
    ("Wren", "scout"),
    ("Cinder", "guard"),
    ("Moss", "none"),
    ("Flint", "hunter"),
    ("Hollow", "guard"),
)


class GameEngine:
    """Turn-driven session: one story, one player, one event queue.

    The presentation layer calls :meth:`init_game` once, then feeds choices
    through :meth:`make_choice` or queued actions through
    :meth:`perform_next_action`. Each of those ends by running
    :meth:`update_game_loop`, which can also be called on its own for an idle
    tick.
    """

    def __init__(self, settings: EngineSettings | None = None, seed: int | str | None = None) -> None:
        self.settings = settings or EngineSettings()
        self._seed: int | str = self.settings.seed if seed is None else seed
        self._player = Player.from_settings(self.settings)
        self._story = StoryGraph()
        self._events = EventManager()
        self._undo_history: list[GameSnapshot] = []
        self._pending_actions: deque[ActionId] = deque()
        self._current_day = 1
        self._phase: GamePhase = "start_screen"
        self._rng = DeterministicRNG.from_seed(self._seed)
        self._last_event: GameEvent | None = None
        self._timeline: list[LogEntry] = []

    # -- read side -----------------------------------------------------------

    def get_player(self) -> Player:
        return self._player

    def get_story(self) -> StoryGraph:
        return self._story

    def get_events(self) -> EventManager:
        return self._events

    def get_day(self) -> int:
        return self._current_day

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def last_event(self) -> GameEvent | None:
        return self._last_event

    @property
    def undo_history(self) -> tuple[GameSnapshot, ...]:
        return tuple(self._undo_history)

    @property
    def pending_actions(self) -> tuple[ActionId, ...]:
        return tuple(self._pending_actions)

    @property
    def timeline(self) -> list[LogEntry]:
        return list(self._timeline)

    @property
    def rng(self) -> DeterministicRNG:
        return self._rng

    def is_over(self) -> bool:
        return self._phase in TERMINAL_PHASES

    # -- lifecycle -----------------------------------------------------------

    def init_game(self) -> None:
        self._player = Player.from_settings(self.settings)
        self._story = StoryGraph()
        self._story.build_tree()
        self._events = EventManager()
        self._undo_history = []
        self._pending_actions = deque()
        self._current_day = 1
        self._rng = DeterministicRNG.from_seed(self._seed)
        self._last_event = None
        self._timeline = []
        self._phase = "playing"
        root = self._story.get_current_node()
        self._log("story", root.scenario_text, {"nodeId": root.id})
        logger.info("New game started (seed=%s, %d story nodes).", self._seed, len(self._story))

    def _require_started(self) -> None:
        if self._phase == "start_screen":
            raise NotInitializedError("init_game() must be called first.")

    def _require_active(self) -> None:
        self._require_started()
        if self._phase in TERMINAL_PHASES:
            raise SessionOverError(f"The game is over ({self._phase}).")

    def _log(self, entry_type: str, line: str, data: dict[str, Any] | None = None) -> None:
        self._timeline.append(LogEntry(day=self._current_day, phase=self._phase, type=entry_type, line=line, data=data))
        overflow = len(self._timeline) - self.settings.timeline_max
        if overflow > 0:
            del self._timeline[:overflow]
        logger.debug("[%s] %s", entry_type, line)

    # -- turn state machine --------------------------------------------------

    def _settle_terminal(self) -> bool:
        if not self._player.is_alive():
            self._phase = "game_over"
            self._log("system", "You collapse in the snow and do not rise.")
            logger.info("Game over on day %d.", self._current_day)
            return True
        node = self._story.get_current_node()
        if node.is_ending:
            self._phase = "victory" if node.ending_outcome == "victory" else "game_over"
            self._log("ending", node.ending_description or node.scenario_text, {"nodeId": node.id})
            logger.info("Reached ending %d (%s) on day %d.", node.id, self._phase, self._current_day)
            return True
        return False

    def update_game_loop(self) -> GamePhase:
        self._require_started()
        if self._phase in TERMINAL_PHASES:
            return self._phase
        if self._settle_terminal():
            return self._phase

        if self._events.has_pending_events():
            self._phase = "event_triggered"
            event = self._events.process_next_event(self._player)
            self._last_event = event
            self._log(
                "event",
                f"{event.title}: {event.description} ({event.effects.describe()})",
                {"priority": event.priority},
            )
            if not self._player.is_alive():
                self._settle_terminal()
            return self._phase

        self._phase = "playing"
        return self._phase

    def make_choice(self, choice: str) -> GamePhase:
        self._require_active()
        side = CHOICE_SIDES.get(str(choice).strip().lower())
        if side is None:
            raise UnknownActionError(f"Unknown choice '{choice}'; expected a/b or left/right.")

        current = self._story.get_current_node()
        target = self._story.peek_child(side)
        required = current.requirement(side)
        if required and not self._player.inventory.has_item(required):
            raise ChoiceLockedError(f"That path needs '{required}'.")

        self.save_state()
        self._story.move(side)
        label = current.choice_a_text if side == "left" else current.choice_b_text
        self._log("choice", label or f"Take the {side} path", {"from": current.id, "to": target.id})
        self._enter_node(target)
        self._end_day()
        self._roll_random_event()
        return self.update_game_loop()

    def _enter_node(self, node: StoryNode) -> None:
        self._log("story", node.scenario_text, {"nodeId": node.id})
        if not node.on_enter.is_empty():
            self._player.apply_deltas(node.on_enter)
            self._log("outcome", node.on_enter.describe())
        if node.grants_item is not None:
            self._grant_item(node.grants_item)
        if node.recruits is not None:
            follower = self._player.recruit_member(node.recruits.name, node.recruits.role)
            self._log("pack", f"{follower.name} the {follower.role} joins your pack.")
        if node.scripted_event is not None:
            self._events.add_event(node.scripted_event)

    def _grant_item(self, item: Item) -> None:
        try:
            self._player.inventory.add_item(item)
        except CapacityExceededError:
            self._log("system", f"No room to carry the {item.name}; you leave it behind.")
            return
        self._log("loot", f"You take the {item.name}.")

    def _end_day(self) -> None:
        self._current_day += 1
        hunters = len(self._player.followers_with_role("hunter"))
        hunger_gain = max(0, self.settings.daily_hunger - hunters * self.settings.hunter_hunger_relief)
        self._player.update_stats(hunger=hunger_gain, energy=-self.settings.daily_energy)
        if self._player.hunger >= STAT_MAX:
            self._player.take_damage(self.settings.starvation_damage)
            self._log("system", f"Starving: health -{self.settings.starvation_damage}.")

    def _roll_random_event(self) -> None:
        if self._rng.chance(self.settings.random_event_chance):
            event = self._events.trigger_random_event(self._rng)
            logger.debug("Random event queued: %s (priority %d).", event.title, event.priority)

    # -- multi-turn actions --------------------------------------------------

    def queue_action(self, action: str) -> None:
        if action not in ACTION_IDS:
            raise UnknownActionError(f"Unknown action '{action}'; expected one of {', '.join(ACTION_IDS)}.")
        self._pending_actions.append(action)  # type: ignore[arg-type]

    def perform_next_action(self) -> GamePhase:
        self._require_active()
        if not self._pending_actions:
            raise QueueEmptyError("No queued actions.")
        action = self._pending_actions.popleft()
        self.save_state()

        if action == "rest":
            self._player.rest()
            self._log("action", "You curl up and sleep through the day.")
        elif action == "hunt":
            self._player.update_stats(energy=-HUNT_ENERGY_COST, hunger=-HUNT_HUNGER_RELIEF)
            self._log("action", "You run down a hare.")
            if self._rng.chance(HUNT_INJURY_CHANCE):
                self._events.add_event(HUNT_INJURY)
        elif action == "forage":
            self._log("action", "You nose through the undergrowth.")
            self._grant_item(FORAGED_HERB)
        elif action == "howl":
            self._player.update_stats(reputation=HOWL_REPUTATION)
            self._log("action", "You howl your name into the dusk.")
            if self._player.reputation >= self.settings.recruit_reputation:
                name, role = RECRUIT_POOL[self._rng.next_int(0, len(RECRUIT_POOL))]
                follower = self._player.recruit_member(name, role)
                self._log("pack", f"{follower.name} the {follower.role} answers and joins you.")

        self._end_day()
        self._roll_random_event()
        return self.update_game_loop()

    def use_item(self, name: str) -> Item:
        self._require_active()
        item = self._player.inventory.use_item(name, self._player)
        self._log("item", f"You use the {item.name}.", {"kind": item.kind})
        return item

    # -- undo ------------------------------------------------------------------

    def save_state(self) -> GameSnapshot:
        node = self._story.get_current_node()
        snapshot = GameSnapshot(
            day=self._current_day,
            health=self._player.health,
            hunger=self._player.hunger,
            energy=self._player.energy,
            current_node_id=node.id,
        )
        self._undo_history.append(snapshot)
        return snapshot

    def undo_last_move(self) -> GameSnapshot:
        """Roll day, health, hunger, energy and story position back one step.

        Inventory, followers, reputation and pending events keep their current
        values.
        """
        self._require_started()
        if not self._undo_history:
            raise NoHistoryError("Nothing to undo.")
        snapshot = self._undo_history[-1]
        self._story.set_current_node(snapshot.current_node_id)
        self._undo_history.pop()

        self._current_day = snapshot.day
        self._player.health = snapshot.health
        self._player.hunger = snapshot.hunger
        self._player.energy = snapshot.energy
        self._last_event = None
        self._phase = "playing"
        self._log("undo", f"Back to day {snapshot.day}.", {"nodeId": snapshot.current_node_id})
        logger.info("Undo to day %d at node %d.", snapshot.day, snapshot.current_node_id)
        self._settle_terminal()
        return snapshot

    # -- persistence ---------------------------------------------------------

    def to_save_data(self) -> SessionSave:
        self._require_started()
        return SessionSave(
            day=self._current_day,
            phase=self._phase,
            player=self._player.to_state(),
            current_node_id=self._story.get_current_node().id,
            pending_events=self._events.pending_events(),
            undo_history=list(self._undo_history),
            pending_actions=list(self._pending_actions),
            rng_seed=self._rng.seed,
            rng_state=self._rng.state,
            rng_calls=self._rng.calls,
        )

    def save_to_file(self, path: Path | str) -> Path:
        return write_session(self.to_save_data(), path)

    def load_from_file(self, path: Path | str) -> None:
        restored = load_session(path, self.settings)
        self._install(restored)

    def _install(self, restored: RestoredSession) -> None:
        self._player = restored.player
        self._story = restored.story
        self._events = restored.events
        self._undo_history = restored.undo_history
        self._pending_actions = restored.pending_actions
        self._current_day = restored.day
        self._phase = restored.phase
        self._rng = restored.rng
        self._seed = restored.rng.seed
        self._last_event = None
        self._timeline = []
        self._log("system", f"Resumed on day {self._current_day}.")
