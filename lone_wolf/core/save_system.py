from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from .errors import CorruptSaveError
from .models import SAVE_VERSION
from .rng import seed_to_uint32

if TYPE_CHECKING:
    from .engine import GameEngine
    from .models import SessionSave

DEFAULT_SLOT_COUNT = 3
MIN_SLOT_COUNT = 1
MAX_SLOT_COUNT = 5
DEFAULT_RNG_SEED = 1337


def normalize_slot_count(slot_count: int) -> int:
    return max(MIN_SLOT_COUNT, min(MAX_SLOT_COUNT, int(slot_count)))


@dataclass(slots=True)
class SlotSummary:
    slot: int
    occupied: bool
    slot_name: str
    day: int = 0
    health: int = 0
    phase: str = "-"
    node_id: int | None = None
    follower_count: int = 0
    last_played: str | None = None


def _coerce_dict(value: Any, default: dict[str, Any] | None = None) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {} if default is None else dict(default)


def _migrate_v1_to_v2(payload: dict[str, Any]) -> dict[str, Any]:
    # v1 had no action queue and reseeded the event roller on every load.
    payload.setdefault("pending_actions", [])
    seed = payload.get("rng_seed", DEFAULT_RNG_SEED)
    payload["rng_seed"] = seed
    payload.setdefault("rng_state", seed_to_uint32(seed))
    payload.setdefault("rng_calls", 0)
    payload["save_version"] = 2
    return payload


MIGRATION_STEPS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1_to_v2,
}


def migrate_save(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError("Save payload must be a JSON object.")
    state = dict(payload)
    try:
        version = int(state.get("save_version", 1))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Save version {state.get('save_version')!r} is not a number.") from exc
    if version < 1:
        raise ValueError(f"Save version {version} is not supported.")
    if version > SAVE_VERSION:
        raise ValueError(f"Save version {version} is newer than supported version {SAVE_VERSION}.")

    while version < SAVE_VERSION:
        step = MIGRATION_STEPS.get(version)
        if step is None:
            raise ValueError(f"No migration step defined from version {version}.")
        state = step(state)
        version = int(state.get("save_version", version + 1))
    state["save_version"] = SAVE_VERSION
    return state


class SlotStorage:
    """Numbered save slots plus a ``meta.json`` index of names and timestamps."""

    def __init__(self, saves_dir: Path, slot_count: int = DEFAULT_SLOT_COUNT) -> None:
        self.saves_dir = Path(saves_dir)
        self.slot_count = normalize_slot_count(slot_count)
        self.slot_ids = tuple(range(1, self.slot_count + 1))
        self.meta_path = self.saves_dir / "meta.json"
        self.saves_dir.mkdir(parents=True, exist_ok=True)
        if not self.meta_path.exists():
            self._write_meta({"last_slot": None, "slot_count": self.slot_count, "slots": {}})

    def _check_slot(self, slot: int) -> None:
        if slot not in self.slot_ids:
            raise ValueError(f"Slot {slot} is outside 1..{self.slot_count}.")

    def slot_path(self, slot: int) -> Path:
        self._check_slot(slot)
        return self.saves_dir / f"slot{slot}.json"

    def _default_slot_meta(self, slot: int) -> dict[str, Any]:
        return {"slot_name": f"Slot {slot}", "last_played": None}

    def _read_meta(self) -> dict[str, Any]:
        if not self.meta_path.exists():
            return {"last_slot": None, "slot_count": self.slot_count, "slots": {}}
        try:
            payload = json.loads(self.meta_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        payload.setdefault("last_slot", None)
        payload["slot_count"] = self.slot_count
        payload["slots"] = _coerce_dict(payload.get("slots"))
        return payload

    def _write_meta(self, payload: dict[str, Any]) -> None:
        self.meta_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def _touch_meta_slot(self, slot: int) -> None:
        meta = self._read_meta()
        entry = meta["slots"].setdefault(str(slot), self._default_slot_meta(slot))
        entry["last_played"] = datetime.now(timezone.utc).isoformat()
        entry.setdefault("slot_name", f"Slot {slot}")
        meta["last_slot"] = slot
        self._write_meta(meta)

    def slot_exists(self, slot: int) -> bool:
        return self.slot_path(slot).exists()

    def save_slot(self, slot: int, engine: "GameEngine") -> Path:
        path = engine.save_to_file(self.slot_path(slot))
        self._touch_meta_slot(slot)
        return path

    def load_slot(self, slot: int, engine: "GameEngine") -> None:
        path = self.slot_path(slot)
        if not path.exists():
            raise CorruptSaveError(f"Slot {slot} is empty.")
        engine.load_from_file(path)
        self._touch_meta_slot(slot)

    def delete_slot(self, slot: int) -> None:
        self.slot_path(slot).unlink(missing_ok=True)
        meta = self._read_meta()
        meta["slots"].pop(str(slot), None)
        if meta.get("last_slot") == slot:
            meta["last_slot"] = None
        self._write_meta(meta)

    def rename_slot(self, slot: int, name: str) -> None:
        self._check_slot(slot)
        clean = name.strip()
        if not clean:
            raise ValueError("Slot name cannot be empty.")
        meta = self._read_meta()
        entry = meta["slots"].setdefault(str(slot), self._default_slot_meta(slot))
        entry["slot_name"] = clean[:32]
        self._write_meta(meta)

    def last_slot(self) -> int | None:
        value = self._read_meta().get("last_slot")
        if isinstance(value, int) and value in self.slot_ids:
            return value
        return None

    def _summarize(self, slot: int, slot_meta: dict[str, Any], save: "SessionSave") -> SlotSummary:
        return SlotSummary(
            slot=slot,
            occupied=True,
            slot_name=str(slot_meta.get("slot_name", f"Slot {slot}")),
            day=save.day,
            health=save.player.health,
            phase=save.phase,
            node_id=save.current_node_id,
            follower_count=len(save.player.followers),
            last_played=slot_meta.get("last_played"),
        )

    def list_slots(self) -> list[SlotSummary]:
        from .persistence import read_session

        summaries: list[SlotSummary] = []
        slots_meta = self._read_meta()["slots"]
        for slot in self.slot_ids:
            slot_meta = _coerce_dict(slots_meta.get(str(slot)), default=self._default_slot_meta(slot))
            empty = SlotSummary(
                slot=slot,
                occupied=False,
                slot_name=str(slot_meta.get("slot_name", f"Slot {slot}")),
                last_played=slot_meta.get("last_played"),
            )
            path = self.slot_path(slot)
            if not path.exists():
                summaries.append(empty)
                continue
            try:
                save = read_session(path)
            except CorruptSaveError:
                summaries.append(empty)
                continue
            summaries.append(self._summarize(slot, slot_meta, save))
        return summaries
