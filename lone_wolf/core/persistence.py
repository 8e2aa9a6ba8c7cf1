from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import CapacityExceededError, CorruptSaveError, NodeNotFoundError, StoryGraphError
from .events import EventManager
from .models import SAVE_VERSION, ActionId, GamePhase, GameSnapshot, SessionSave
from .player import Player
from .rng import DeterministicRNG
from .save_system import migrate_save
from .settings import EngineSettings
from .story import StoryGraph, StoryNode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RestoredSession:
    player: Player
    story: StoryGraph
    events: EventManager
    undo_history: list[GameSnapshot]
    pending_actions: deque[ActionId]
    day: int
    phase: GamePhase
    rng: DeterministicRNG


def _validation_details(exc: ValidationError) -> list[str]:
    details = []
    for issue in exc.errors():
        issue_path = ".".join(str(part) for part in issue.get("loc", [])) or "(root)"
        details.append(f"{issue_path}: {issue.get('msg', 'validation error')}")
    return details


def write_session(save: SessionSave, path: Path | str) -> Path:
    """Write ``save`` as JSON; the target file is replaced only after a complete write."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    save.save_version = SAVE_VERSION
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(save.model_dump(mode="json"), handle, indent=2)
            handle.write("\n")
        tmp_path.replace(target)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    logger.info("Session saved to %s (day %d).", target, save.day)
    return target


def parse_session(payload: Any) -> SessionSave:
    try:
        migrated = migrate_save(payload)
    except ValueError as exc:
        raise CorruptSaveError(f"Save data cannot be migrated: {exc}") from exc
    try:
        return SessionSave.model_validate(migrated)
    except ValidationError as exc:
        raise CorruptSaveError("Save data failed validation.", _validation_details(exc)) from exc


def read_session(path: Path | str) -> SessionSave:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CorruptSaveError(f"Save file not found: {source}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CorruptSaveError(f"Save file unreadable: {source}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptSaveError(f"Invalid JSON in {source.name}: {exc.msg} at line {exc.lineno}") from exc
    return parse_session(payload)


def _phase_conflict(phase: GamePhase, player: Player, node: StoryNode) -> str | None:
    """Terminal phases must agree with what the rest of the save shows."""
    if phase == "victory":
        if not player.is_alive():
            return "phase: victory recorded for a dead player"
        if not node.is_ending or node.ending_outcome != "victory":
            return f"phase: victory recorded on node {node.id}, which is not a victory ending"
    elif phase == "game_over":
        defeated = node.is_ending and node.ending_outcome == "defeat"
        if player.is_alive() and not defeated:
            return f"phase: game_over recorded for a living player on node {node.id}"
    return None


def restore_session(save: SessionSave, settings: EngineSettings) -> RestoredSession:
    """Rebuild every live component from ``save`` without touching any engine.

    The story tree is rebuilt from code and only the player's position is taken
    from the save.
    """
    if save.phase == "start_screen":
        raise CorruptSaveError("Save data records a session that was never started.")

    try:
        player = Player.from_state(save.player, settings)
    except CapacityExceededError as exc:
        raise CorruptSaveError("Saved inventory is larger than the configured capacity.", [str(exc)]) from exc

    story = StoryGraph()
    try:
        story.build_tree()
        story.set_current_node(save.current_node_id)
    except NodeNotFoundError as exc:
        raise CorruptSaveError(f"Saved story position {save.current_node_id} does not exist.") from exc
    except StoryGraphError as exc:
        raise CorruptSaveError("Story tree could not be rebuilt.", exc.details) from exc

    known_ids = set(story.node_ids())
    missing = [
        f"undo_history.{index}.current_node_id: unknown node {snapshot.current_node_id}"
        for index, snapshot in enumerate(save.undo_history)
        if snapshot.current_node_id not in known_ids
    ]
    if missing:
        raise CorruptSaveError("Undo history references unknown story nodes.", missing)

    conflict = _phase_conflict(save.phase, player, story.get_current_node())
    if conflict:
        raise CorruptSaveError(f"Saved phase '{save.phase}' does not match the saved state.", [conflict])

    events = EventManager()
    events.extend(save.pending_events)

    rng = DeterministicRNG(seed=save.rng_seed, state=save.rng_state, calls=save.rng_calls)
    return RestoredSession(
        player=player,
        story=story,
        events=events,
        undo_history=list(save.undo_history),
        pending_actions=deque(save.pending_actions),
        day=save.day,
        phase=save.phase,
        rng=rng,
    )


def load_session(path: Path | str, settings: EngineSettings) -> RestoredSession:
    save = read_session(path)
    restored = restore_session(save, settings)
    logger.info("Session loaded from %s (day %d, node %d).", path, save.day, save.current_node_id)
    return restored
