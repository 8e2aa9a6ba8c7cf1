from __future__ import annotations

import json
from pathlib import Path

import pytest

from lone_wolf.core.engine import GameEngine
from lone_wolf.core.errors import CorruptSaveError
from lone_wolf.core.save_system import SlotStorage, normalize_slot_count
from lone_wolf.core.settings import EngineSettings


def _engine() -> GameEngine:
    engine = GameEngine(settings=EngineSettings(random_event_chance=0.0), seed=5)
    engine.init_game()
    return engine


def test_slot_count_is_clamped() -> None:
    assert normalize_slot_count(0) == 1
    assert normalize_slot_count(3) == 3
    assert normalize_slot_count(9) == 5


def test_storage_creates_meta_and_lists_empty_slots(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path / "saves")

    assert storage.meta_path.exists()
    slots = storage.list_slots()
    assert [summary.slot for summary in slots] == [1, 2, 3]
    assert all(not summary.occupied for summary in slots)
    assert storage.last_slot() is None


def test_save_and_load_slot_roundtrip(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path)
    engine = _engine()
    engine.make_choice("b")
    engine.make_choice("a")
    storage.save_slot(2, engine)

    other = _engine()
    storage.load_slot(2, other)

    assert other.get_story().get_current_node().id == 6
    assert other.get_player().inventory.has_item("Bone Shard")
    assert storage.last_slot() == 2

    summary = storage.list_slots()[1]
    assert summary.occupied is True
    assert summary.day == 3
    assert summary.node_id == 6
    assert summary.last_played is not None


def test_slot_bounds_are_checked(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path, slot_count=2)
    with pytest.raises(ValueError):
        storage.slot_path(3)
    with pytest.raises(ValueError):
        storage.save_slot(0, _engine())


def test_loading_empty_slot_is_corrupt(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path)
    with pytest.raises(CorruptSaveError, match="empty"):
        storage.load_slot(1, _engine())


def test_corrupt_slot_is_listed_as_unoccupied(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path)
    storage.slot_path(1).write_text("{not json", encoding="utf-8")

    assert storage.list_slots()[0].occupied is False


def test_rename_and_delete_slot(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path)
    storage.save_slot(1, _engine())

    storage.rename_slot(1, "  Winter run " + "x" * 40)
    meta = json.loads(storage.meta_path.read_text(encoding="utf-8"))
    assert meta["slots"]["1"]["slot_name"].startswith("Winter run")
    assert len(meta["slots"]["1"]["slot_name"]) == 32
    with pytest.raises(ValueError):
        storage.rename_slot(1, "   ")

    storage.delete_slot(1)

    assert storage.slot_exists(1) is False
    assert storage.last_slot() is None
    assert storage.list_slots()[0].slot_name == "Slot 1"


def test_damaged_meta_falls_back_to_defaults(tmp_path: Path) -> None:
    storage = SlotStorage(tmp_path)
    storage.meta_path.write_text("[1, 2", encoding="utf-8")

    assert storage.last_slot() is None
    assert [summary.slot_name for summary in storage.list_slots()] == ["Slot 1", "Slot 2", "Slot 3"]
