from __future__ import annotations

import pytest

from lone_wolf.core.engine import GameEngine
from lone_wolf.core.errors import (
    ChoiceLockedError,
    DeadEndError,
    NotInitializedError,
    QueueEmptyError,
    SessionOverError,
    UnknownActionError,
)
from lone_wolf.core.models import GameEvent
from lone_wolf.core.settings import EngineSettings


def _engine(**overrides) -> GameEngine:
    settings = EngineSettings(random_event_chance=0.0, **overrides)
    engine = GameEngine(settings=settings, seed=7)
    engine.init_game()
    return engine


def test_new_engine_waits_on_start_screen() -> None:
    engine = GameEngine()
    assert engine.phase == "start_screen"
    with pytest.raises(NotInitializedError):
        engine.make_choice("a")
    with pytest.raises(NotInitializedError):
        engine.update_game_loop()


def test_init_game_builds_story_and_resets_player() -> None:
    engine = _engine()

    assert engine.phase == "playing"
    assert engine.get_day() == 1
    assert engine.get_story().get_current_node().id == 1
    assert engine.get_player().stats() == {"health": 100, "hunger": 50, "energy": 100, "reputation": 50}
    assert engine.undo_history == ()
    assert engine.timeline[0].type == "story"


def test_choice_advances_node_and_day() -> None:
    engine = _engine()

    phase = engine.make_choice("a")

    player = engine.get_player()
    assert phase == "playing"
    assert engine.get_story().get_current_node().id == 2
    assert engine.get_day() == 2
    assert player.energy == 90
    assert player.hunger == 55
    assert len(engine.undo_history) == 1


def test_choice_accepts_left_and_right_aliases() -> None:
    engine = _engine()
    engine.make_choice("LEFT")
    engine.make_choice(" right ")
    assert engine.get_story().get_current_node().id == 5


def test_unknown_choice_is_rejected_without_side_effects() -> None:
    engine = _engine()
    with pytest.raises(UnknownActionError):
        engine.make_choice("c")
    assert engine.get_day() == 1
    assert engine.undo_history == ()


def test_scripted_event_moves_loop_through_event_triggered() -> None:
    engine = _engine()

    phase = engine.make_choice("b")

    assert phase == "event_triggered"
    assert engine.last_event is not None
    assert engine.last_event.title == "Avalanche Warning"
    assert engine.get_player().energy == 70
    assert engine.update_game_loop() == "playing"


def test_higher_priority_event_is_processed_first() -> None:
    engine = _engine()
    engine.make_choice("a")
    engine.get_events().add_event(GameEvent(title="Normal", priority=3))
    engine.get_events().add_event(GameEvent(title="Critical", priority=1))

    assert engine.update_game_loop() == "event_triggered"
    assert engine.last_event is not None
    assert engine.last_event.title == "Critical"
    engine.update_game_loop()
    assert engine.last_event.title == "Normal"
    assert engine.update_game_loop() == "playing"


def test_victory_ending_finishes_the_session() -> None:
    engine = _engine()
    engine.make_choice("a")
    engine.make_choice("b")
    phase = engine.make_choice("a")

    assert phase == "victory"
    assert engine.get_story().get_current_node().id == 10
    assert engine.is_over() is True
    with pytest.raises(SessionOverError):
        engine.make_choice("a")
    assert engine.update_game_loop() == "victory"


def test_defeat_ending_is_game_over() -> None:
    engine = _engine()
    engine.make_choice("b")
    engine.make_choice("a")
    phase = engine.make_choice("a")

    assert phase == "game_over"
    assert engine.get_story().get_current_node().id == 12
    assert engine.get_player().health == 40


def test_dead_end_choice_changes_nothing() -> None:
    engine = _engine()
    for _ in range(3):
        engine.make_choice("a")
    assert engine.get_story().get_current_node().id == 8
    day = engine.get_day()
    stats = engine.get_player().stats()

    with pytest.raises(DeadEndError):
        engine.make_choice("b")

    assert engine.get_story().get_current_node().id == 8
    assert engine.get_day() == day
    assert engine.get_player().stats() == stats
    assert len(engine.undo_history) == 3


def test_locked_choice_needs_the_item() -> None:
    engine = _engine()
    engine.make_choice("a")
    engine.make_choice("a")
    engine.make_choice("b")
    assert engine.get_story().get_current_node().id == 9
    assert [follower.name for follower in engine.get_player().followers] == ["Ash"]

    engine.use_item("Antler Tine")
    with pytest.raises(ChoiceLockedError, match="Antler Tine"):
        engine.make_choice("a")
    assert engine.get_story().get_current_node().id == 9
    assert len(engine.undo_history) == 3


def test_eating_food_never_locks_a_story_path() -> None:
    engine = _engine()
    engine.make_choice("a")
    engine.make_choice("a")
    engine.make_choice("b")

    engine.use_item("Salmon")

    assert engine.make_choice("a") == "victory"
    assert engine.get_story().get_current_node().id == 17


def test_idle_tick_after_lethal_damage_is_game_over() -> None:
    engine = _engine()
    engine.get_player().take_damage(150)

    assert engine.get_player().health == 0
    assert engine.update_game_loop() == "game_over"
    assert engine.is_over() is True


def test_hunter_in_pack_slows_hunger() -> None:
    engine = _engine()
    engine.make_choice("a")
    engine.make_choice("a")
    hunger_before = engine.get_player().hunger

    engine.make_choice("b")

    assert engine.get_player().hunger == hunger_before + 3


def test_starvation_damages_health() -> None:
    engine = _engine(start_hunger=98)
    engine.make_choice("a")
    player = engine.get_player()
    assert player.hunger == 100
    assert player.health == 90


def test_death_ends_the_session() -> None:
    engine = _engine(start_health=5, start_hunger=100, starvation_damage=50)
    phase = engine.make_choice("a")
    assert engine.get_player().health == 0
    assert phase == "game_over"


def test_rest_action_restores_energy_and_passes_a_day() -> None:
    engine = _engine(start_energy=10)
    engine.queue_action("rest")
    assert engine.pending_actions == ("rest",)

    engine.perform_next_action()

    assert engine.get_player().energy == 95
    assert engine.get_day() == 2
    assert engine.pending_actions == ()
    assert len(engine.undo_history) == 1


def test_hunt_trades_energy_for_food() -> None:
    engine = _engine()
    engine.queue_action("hunt")
    engine.perform_next_action()
    player = engine.get_player()
    assert player.energy == 80
    assert player.hunger == 30


def test_forage_finds_a_herb() -> None:
    engine = _engine()
    engine.queue_action("forage")
    engine.perform_next_action()
    assert engine.get_player().inventory.has_item("Feverfew") is True


def test_howl_recruits_once_reputation_is_high() -> None:
    engine = _engine(start_reputation=58)
    engine.queue_action("howl")
    engine.perform_next_action()
    player = engine.get_player()
    assert player.reputation == 63
    assert len(player.followers) == 1


def test_actions_are_validated_and_queue_can_run_dry() -> None:
    engine = _engine()
    with pytest.raises(UnknownActionError):
        engine.queue_action("dig")
    with pytest.raises(QueueEmptyError):
        engine.perform_next_action()


def test_timeline_is_capped() -> None:
    engine = _engine(timeline_max=10)
    for _ in range(12):
        engine.queue_action("rest")
        engine.perform_next_action()
    assert len(engine.timeline) == 10
